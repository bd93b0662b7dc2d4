import hashlib

def new_digest(algorithm: str = "sha256"):
    """
    returns a fresh hash object for the given algorithm.
    """
    try:
        return hashlib.new(algorithm)
    except ValueError as e:
        raise ValueError(f"unsupported checksum algorithm: {algorithm}") from e

def checksums_match(expected: str, actual: str) -> bool:
    return expected.strip().lower() == actual.strip().lower()
