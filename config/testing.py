SECRET_KEY = "test-secret"

API_CONFIG = {
    "base_url": "http://crm.test",
    "token": None,
    "timeout": 5,
}

EMPLOYEE_FETCH_LIMIT = 1000

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
