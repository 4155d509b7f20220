"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    environment: str = "development"
    debug: bool = False
    service_name: str = "todo-service"

    # CORS
    cors_origins: list[str] = ["*"]

    # Dates are resolved in this zone (fixed UTC+9, no DST)
    timezone: str = "Asia/Seoul"

    # Language the model writes user-facing text in
    response_language: str = "Korean"

    # AWS
    aws_region: str = "us-east-1"

    # Bedrock - Claude Haiku 4.5 with cross-region inference
    bedrock_model_id: str = "us.anthropic.claude-haiku-4-5-20251001-v1:0"
    parse_temperature: float = 0.2
    analysis_temperature: float = 0.3
    parse_max_tokens: int = 500
    analysis_max_tokens: int = 1500

    # USD per 1K tokens, used only for cost logging
    input_cost_per_1k_tokens: float = 0.001
    output_cost_per_1k_tokens: float = 0.005

    # Supabase (auth + todos table)
    supabase_url: str = ""
    supabase_publishable_key: str = ""
    todos_table: str = "todos"
    http_timeout: float = 10.0

    # Session cookies and routing guard
    access_token_cookie: str = "sb-access-token"
    refresh_token_cookie: str = "sb-refresh-token"
    code_verifier_cookie: str = "sb-code-verifier"
    login_path: str = "/login"
    home_path: str = "/"
    protected_paths: list[str] = ["/"]
    auth_paths: list[str] = ["/login", "/signup"]

    class Config:
        env_prefix = "TODO_"
        case_sensitive = False


settings = Settings()
