"""
Configuration utilities.
"""
import json
import os

from dotenv import load_dotenv


DEFAULT_CONFIG = {
    "db_path": "job_assistant.db",
    "ai_provider": "groq",
    "groq_api_key": "",
    "groq_model": "llama-3.1-8b-instant",
    "OpenAI_API_KEY": "",
    "OpenAI_Model": "gpt-4o-mini",
    "ollama_base_url": "http://localhost:11434",
    "ollama_model": "",
    "log_level": "INFO",
    "log_file": None,
    "session_cookie_name": "session_token",
    "session_ttl_days": 7,
    "password_reset_ttl_seconds": 3600,
    "app_url": "http://localhost:5001",
    "max_resume_upload_bytes": 8 * 1024 * 1024,
    "port": 5001,
}

# Environment variable -> config key
ENV_OVERRIDES = {
    "DB_PATH": "db_path",
    "AI_PROVIDER": "ai_provider",
    "GROQ_API_KEY": "groq_api_key",
    "GROQ_MODEL": "groq_model",
    "OPENAI_API_KEY": "OpenAI_API_KEY",
    "OPENAI_MODEL": "OpenAI_Model",
    "OLLAMA_BASE_URL": "ollama_base_url",
    "OLLAMA_MODEL": "ollama_model",
    "LOG_LEVEL": "log_level",
    "LOG_FILE": "log_file",
    "APP_URL": "app_url",
    "PORT": "port",
}

INTEGER_KEYS = {"port", "session_ttl_days", "password_reset_ttl_seconds", "max_resume_upload_bytes"}


def load_config(file_name):
    """
    Load configuration from a JSON file.

    Args:
        file_name (str): Path to the configuration JSON file

    Returns:
        dict: Configuration dictionary
    """
    with open(file_name, 'r', encoding='utf-8') as f:
        return json.load(f)


def get_config(config_path='config.json', overrides=None):
    """
    Build the effective configuration.

    Defaults are overlaid by the JSON file (when it exists), then by
    environment variables (a .env file is honoured), then by ``overrides``.

    Args:
        config_path (str): Path to the configuration JSON file
        overrides (dict): Explicit values that win over everything else

    Returns:
        dict: Configuration dictionary
    """
    load_dotenv()

    config = dict(DEFAULT_CONFIG)
    if config_path and os.path.exists(config_path):
        config.update(load_config(config_path))

    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config[key] = value

    if overrides:
        config.update(overrides)

    for key in INTEGER_KEYS:
        if config.get(key) is not None:
            config[key] = int(config[key])

    config["ai_provider"] = (config.get("ai_provider") or "groq").lower()
    return config


def is_ai_configured(config):
    """Whether the selected AI provider has the settings it needs."""
    provider = config.get("ai_provider", "groq")
    if provider == "groq":
        return bool(config.get("groq_api_key"))
    if provider == "openai":
        return bool(config.get("OpenAI_API_KEY"))
    if provider == "ollama":
        return bool(config.get("ollama_base_url")) and bool(config.get("ollama_model"))
    return False
