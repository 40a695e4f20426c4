from .tokens import create_JWT_access_token, decode_JWT_access_token, get_subject_from_token

__all__ = ["create_JWT_access_token", "decode_JWT_access_token", "get_subject_from_token"]
