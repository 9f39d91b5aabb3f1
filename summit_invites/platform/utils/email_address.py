def normalize_email(email: str) -> str:
    """Emails are matched case-insensitively and stored lowercased."""
    return email.strip().lower()
