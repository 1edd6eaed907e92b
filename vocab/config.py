from pydantic_settings import BaseSettings
from pathlib import Path

# Get the project root directory (parent of vocab folder)
PROJECT_ROOT = Path(__file__).parent.parent

class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""
    database_url: str = "sqlite:///./vocab.db"
    log_level: str = "INFO"
    
    # SM-2 scheduling parameters
    initial_ease_factor: float = 2.5
    minimum_ease_factor: float = 1.3
    mastery_threshold_days: int = 21
    max_interval_days: int = 365
    
    # Defaults for new learner profiles
    default_daily_new_card_limit: int = 20
    default_daily_review_limit: int = 100
    quiz_question_count: int = 10
    
    # Where the CLI keeps today's session state between runs
    session_state_path: str = ".vocab_session.json"
    
    class Config:
        env_file = str(PROJECT_ROOT / ".env")

settings = Settings()
