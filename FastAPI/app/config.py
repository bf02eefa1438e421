from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Required from environment (.env / deployment secrets)
    database_url: str
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24  # 1 day
    app_env: str = "development"  # development, staging, production

    # Bedrock LLM for ranking the review queue against a job description
    bedrock_llm_model_id: str = "mistral.ministral-3-8b-instruct"
    bedrock_llm_enabled: bool = True
    aws_region: str = "us-west-2"
    llm_timeout_seconds: float = 60.0

    # CORS origins as comma-separated values
    # Example: "https://app.example.com,https://review.example.com"
    cors_allow_origins: str = "http://localhost:5173"

    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # Review queue ranking
    rank_queue_max_candidates: int = 25

    # Request guards
    rate_limit_auth_per_min: int = 20
    rate_limit_rank_per_min: int = 10

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
