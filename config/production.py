import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_CONFIG = {
    "base_url": os.getenv("CRM_API_URL", "http://localhost:3000"),
    "token": os.getenv("CRM_API_TOKEN"),
    "timeout": int(os.getenv("CRM_API_TIMEOUT", "15")),
}

EMPLOYEE_FETCH_LIMIT = int(os.getenv("EMPLOYEE_FETCH_LIMIT", "1000"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
