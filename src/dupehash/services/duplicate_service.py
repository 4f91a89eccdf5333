from typing import List, Tuple

from dupehash.core.models import DuplicateGroup


class DuplicateService:
    @staticmethod
    def quarantine_candidates(groups: List[DuplicateGroup]) -> List[str]:
        """
        All but the first member of each group.
        Which member is first is decided upstream (groups come sorted by path).
        """
        candidates = []
        for group in groups:
            for file in group.files[1:]:
                candidates.append(file.path)
        return candidates

    @staticmethod
    def remove_files_from_groups(groups: List[DuplicateGroup], file_paths: List[str]) -> List[DuplicateGroup]:
        """
        Removes files with the given paths from all groups.
        Groups left with fewer than 2 files are discarded.
        """
        to_remove = set(file_paths)
        updated_groups = []
        for group in groups:
            remaining = [f for f in group.files if f.path not in to_remove]
            if len(remaining) >= 2:
                updated_groups.append(DuplicateGroup(digest=group.digest, files=remaining))
        return updated_groups

    @staticmethod
    def keep_only_one_file_per_group(groups: List[DuplicateGroup]) -> Tuple[List[str], List[DuplicateGroup]]:
        """
        Keeps the first file per group and marks the rest.
        Returns:
            - List of file paths to move away
            - Updated list of duplicate groups (empty once every group is reduced to one file)
        """
        candidates = DuplicateService.quarantine_candidates(groups)
        return candidates, DuplicateService.remove_files_from_groups(groups, candidates)

    @staticmethod
    def calculate_space_savings(groups: List[DuplicateGroup], file_paths: List[str]) -> int:
        """Total bytes freed by moving the given files away."""
        selected = set(file_paths)
        return sum(f.size for group in groups for f in group.files if f.path in selected)
