"""
Default values and well-known field names for reCAPTCHA v3 verification.
"""

# Google reCAPTCHA verification API endpoint
RECAPTCHA_API = "https://www.google.com/recaptcha/api/siteverify"

# Scores range from 0.0 (very likely a bot) to 1.0 (very likely a human)
DEFAULT_THRESHOLD = 0.5
MIN_SCORE = 0.0
MAX_SCORE = 1.0

FORBIDDEN = 403
DEFAULT_ERROR_MESSAGE = "reCAPTCHA verification failed"

# Request contract
TOKEN_BODY_FIELD = "recaptchaV3Token"
TOKEN_HEADER = "recaptcha-v3-token"
SCORE_ATTRIBUTE = "recaptcha_v3_score"
