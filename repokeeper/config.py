from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # GitHub
    GITHUB_TOKEN: str = ""

    # AI Configuration - Values come from .env file
    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_MODEL: str = "claude-sonnet-4-20250514"

    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"

    CHATGPT_API_KEY: str = ""
    CHATGPT_MODEL: str = "gpt-4o"

    DEEPSEEK_API_KEY: str = ""
    DEEPSEEK_MODEL: str = "deepseek-chat"
    DEEPSEEK_BASE_URL: str = "https://api.deepseek.com"

    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"

    OLLAMA_BASE_URL: str = ""  # e.g. http://localhost:11434
    OLLAMA_MODEL: str = "llama3"

    # Provider health checks
    HEALTH_CHECK_TIMEOUT: float = 3.0  # seconds
    HEALTH_CACHE_TTL: float = 120.0  # seconds

    # Sanitization
    DRY_RUN: bool = True
    REPORT_DIR: str = "reports"
    SANITIZE_MAX_WORKERS: int = 1

    # Notifications
    DISCORD_WEBHOOK: str = ""  # incoming webhook URL, empty disables Discord

    class Config:
        env_file = ".env"
        extra = "ignore"
