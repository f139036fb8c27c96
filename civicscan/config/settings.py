from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    app_env: str = "dev"
    log_level: str = "INFO"

    roboflow_api_key: str = ""
    roboflow_workspace: str = ""
    roboflow_workflow: str = ""
    roboflow_api_url: str = "https://serverless.roboflow.com"
    roboflow_model_endpoint: str = (
        "https://serverless.roboflow.com/infer/workflows/civicrezo/custom-workflow-6"
    )

    quick_dev_mode: bool = False

    inference_timeout_seconds: float = 8.0
    workflow_timeout_seconds: float = 15.0
    workflow_confidence_threshold: float = 0.7

    user_agent: str = "civicscan/0.1 (python-httpx)"
