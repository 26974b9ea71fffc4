from werkzeug.security import check_password_hash, generate_password_hash

# PBKDF2-SHA256 с солью, формат "pbkdf2:sha256:<iterations>$<salt>$<hash>"
HASH_METHOD = "pbkdf2:sha256"


def hash_password(password: str) -> str:
    return generate_password_hash(password, method=HASH_METHOD)


def verify_password(password: str, stored: str) -> bool:
    return check_password_hash(stored, password)
