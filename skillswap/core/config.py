from pydantic_settings import BaseSettings
from functools import lru_cache

class Settings(BaseSettings):
    app_name: str = "SkillSwap API"
    debug: bool = False
    environment: str = "development"
    api_v1_prefix: str = "/api/v1"
    frontend_url: str = "http://localhost:5173"

    # Auth
    jwt_secret: str = "your-secret-key"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    bcrypt_rounds: int = 12
    # Registrations presenting this token are created with the admin role
    admin_token: str = ""

    # Storage: "memory" or "supabase"
    storage_backend: str = "memory"
    supabase_url: str = ""
    supabase_key: str = ""

    # When true a swap has to be accepted before it can be completed
    require_accepted_before_completion: bool = False

    class Config:
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_settings() -> Settings:
    return Settings()
