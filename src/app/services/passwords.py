import bcrypt

# Cost factor 12
_ROUNDS = 12
_DUMMY_HASH = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(_ROUNDS))


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def burn_password_check(password: str) -> None:
    """Spend the same time as a real check when there is no hash to compare against."""
    bcrypt.checkpw(password.encode("utf-8"), _DUMMY_HASH)
