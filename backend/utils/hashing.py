from werkzeug.security import generate_password_hash, check_password_hash


def get_password_hash(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)
