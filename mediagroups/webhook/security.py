import hmac


def validate_secret_token(header_value: str, secret_token: str) -> bool:
    """Validate the X-Telegram-Bot-Api-Secret-Token header set by setWebhook."""
    if not secret_token:
        return True
    return hmac.compare_digest(header_value.encode(), secret_token.encode())
