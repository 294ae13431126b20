"""
Configuration management for Avatar Chat.
Handles loading and validation of application settings.
"""

import os
from pathlib import Path
from typing import Dict, Any, Optional, List, Mapping
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class AIConfig(BaseModel):
    """Language model provider configuration."""
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    anthropic_model: str = "claude-3-haiku-20240307"
    temperature: float = 0.8
    max_tokens: int = 200
    timeout_s: float = 20.0

class VoiceConfig(BaseModel):
    """Speech synthesis configuration."""
    tts_engine: str = "openai"  # openai, google, none
    tts_model: str = "tts-1"
    tts_voice: str = "echo"
    tts_speed: float = 1.0
    timeout_s: float = 15.0

    # Google Cloud Text-to-Speech
    google_credentials_path: Optional[str] = None
    language_code: str = "cmn-CN"
    google_voice_name: str = "cmn-CN-Wavenet-B"

class PersonaConfig(BaseModel):
    """Assistant persona used to build the system prompt."""
    name: str = "AI4CZ"
    project_facts: List[str] = [
        "AI4CZ是一个创新的AI驱动项目，建立在BNB Chain上",
        "官方Twitter账号：https://x.com/ai4_cz",
        "你是AI4CZ社区的智能助手，帮助用户了解项目和参与社区",
    ]
    restrictions: List[str] = [
        "你只讨论与AI4CZ项目直接相关的话题",
        "当被问到其他话题时，礼貌地引导回AI4CZ",
        "始终提及官方Twitter账号是 https://x.com/ai4_cz",
        "鼓励用户关注我们的Twitter获取最新更新",
    ]
    personality: str = "专业、友好、充满热情。你对AI4CZ项目充满信心。"
    language_instruction: str = "你用中文自然且对话式地交流。"
    length_instruction: str = "保持回复简洁（每条消息最多2-3句话）。"

    # Static replies used when no provider produced text
    unconfigured_message: str = (
        "你好！看起来我没有配置AI凭据。请确保在环境变量中设置了OPENAI_API_KEY或ANTHROPIC_API_KEY。"
    )
    failure_message: str = "哎呀！处理时出现了一个小错误。你能再试一次吗？"

class ServerConfig(BaseModel):
    """HTTP server configuration."""
    host: str = "0.0.0.0"
    port: int = 8000
    allow_origins: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

class Config(BaseModel):
    """Main application configuration."""
    app_name: str = "Avatar Chat"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    log_dir: Path = Path("logs")

    # Component configurations
    ai: AIConfig = Field(default_factory=AIConfig)
    voice: VoiceConfig = Field(default_factory=VoiceConfig)
    persona: PersonaConfig = Field(default_factory=PersonaConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            base[key] = deep_merge(base[key], value)
        else:
            base[key] = value
    return base

def _env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    """Collect configuration overrides from environment variables."""
    overrides: Dict[str, Any] = {}

    # Provider credentials; presence enables the matching provider
    if env.get('OPENAI_API_KEY'):
        overrides.setdefault('ai', {})['openai_api_key'] = env.get('OPENAI_API_KEY')
    if env.get('ANTHROPIC_API_KEY'):
        overrides.setdefault('ai', {})['anthropic_api_key'] = env.get('ANTHROPIC_API_KEY')

    # Voice Configuration
    if env.get('CHAT_TTS_ENGINE'):
        overrides.setdefault('voice', {})['tts_engine'] = env.get('CHAT_TTS_ENGINE')
    if env.get('GOOGLE_APPLICATION_CREDENTIALS'):
        overrides.setdefault('voice', {})['google_credentials_path'] = env.get('GOOGLE_APPLICATION_CREDENTIALS')

    # Server Configuration
    if env.get('CHAT_HOST'):
        overrides.setdefault('server', {})['host'] = env.get('CHAT_HOST')
    if env.get('CHAT_PORT'):
        overrides.setdefault('server', {})['port'] = env.get('CHAT_PORT')
    if env.get('CHAT_ALLOW_ORIGINS'):
        origins = [origin.strip() for origin in env['CHAT_ALLOW_ORIGINS'].split(',') if origin.strip()]
        overrides.setdefault('server', {})['allow_origins'] = origins

    if env.get('CHAT_LOG_LEVEL'):
        overrides['log_level'] = env.get('CHAT_LOG_LEVEL')

    return overrides

def load_config(config_file: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> Config:
    """Load configuration from file or environment variables.

    Args:
        config_file: YAML file to read; a missing file is not an error.
        env: Optional mapping of environment variables for easier testing.
    """

    # Default config file path
    if config_file is None:
        config_file = "configs/config.yaml"

    config_path = Path(config_file)

    # Load from YAML if exists
    config_data = {}
    if config_path.exists() and config_path.suffix in ['.yaml', '.yml']:
        import yaml
        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

    environment = env if env is not None else os.environ
    final_config = deep_merge(config_data, _env_overrides(environment))

    return Config(**final_config)
