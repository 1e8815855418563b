import os


class Settings:
    def __init__(self):
        self.app_name = "LeadDesk CRM"
        self.api_version = "1.0.0"
        self.environment = os.getenv("LEADDESK_ENVIRONMENT", "development")
        self.secret_key = os.getenv("LEADDESK_SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = 480
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = os.getenv("LEADDESK_DATABASE_URL", "sqlite:///./leaddesk.db")
        # Day boundaries (today, yesterday, daily trend buckets) are computed in this zone
        self.timezone = os.getenv("LEADDESK_TIMEZONE", "UTC")
        self.overdue_threshold_days = 5
        self.fresh_threshold_days = 1
        self.seed_sample_leads = self.environment == "development"
        self.sample_lead_count = 30


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
