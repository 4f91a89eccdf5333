from dupehash.core.models import HashAlgorithm

ALGORITHM_ALIASES = {
    "blake3": HashAlgorithm.BLAKE3,
    "sha256": HashAlgorithm.SHA256,
    "sha-256": HashAlgorithm.SHA256,
    "xxhash": HashAlgorithm.XXHASH64,
    "xxhash64": HashAlgorithm.XXHASH64,
    "xxh64": HashAlgorithm.XXHASH64,
}

ALGORITHM_CHOICES = list(ALGORITHM_ALIASES.keys())

ALGORITHM_HELP_TEXT = (
    "Hash algorithm for content fingerprints:\n"
    "  blake3   : 256-bit cryptographic hash (default)\n"
    "  sha256   : 256-bit cryptographic hash\n"
    "  xxhash   : 64-bit non-cryptographic hash, fastest;\n"
    "             matches are trusted as-is unless --verify is given\n"
    "Example    : %(prog)s -i ~/Downloads -a xxhash --verify\n"
)

EPILOG_TEXT = """
Examples:
  Basic usage - find duplicates in Downloads folder
  %(prog)s -i ~/Downloads

  Only .jpg/.png files between 500KB and 10MB whose name contains IMG
  %(prog)s -i ~/Pictures -m 500KB -M 10MB -x jpg png -p IMG

  Fast hashing with byte-by-byte confirmation, JSON report written to a file
  %(prog)s -i ~/Downloads -a xxhash --verify --format json -o report.json

  Move all but one copy of each duplicate into a quarantine folder
  %(prog)s -i ~/Downloads --quarantine ~/dupes-quarantine --force

Zero-byte files are skipped by default (-m 1); pass -m 0 to include them.
"""
