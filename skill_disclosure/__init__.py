"""skill-disclosure: agent skills with progressive disclosure.

Skills are folders holding a SKILL.md file (YAML frontmatter plus markdown
instructions) and optional bundled resources. They are revealed in three
levels:
1. Discovery (SkillLoader.discover): metadata and resource handles only
2. Loading (SkillLoader.load): full instructions
3. Resources (SkillLoader.load_resource_content): one file's content on demand

A loaded skill can be executed with a chat model (SkillExecutor) or served
to other agents over MCP (create_server).
"""

from skill_disclosure.config import AppConfig, ConfigError, ModelConfig, SkillsConfig, load_config
from skill_disclosure.skills.models import ResourceType, SkillDefinition, SkillResource
from skill_disclosure.skills.parser import SkillParseError, parse_frontmatter
from skill_disclosure.skills.loader import SkillLoader
from skill_disclosure.executor import SkillExecutionResult, SkillExecutor, create_chat_model
from skill_disclosure.tools import McpClientService, ToolRouter

__version__ = "0.1.0"
__all__ = [
    # Config
    "AppConfig",
    "ConfigError",
    "ModelConfig",
    "SkillsConfig",
    "load_config",
    # Skills
    "ResourceType",
    "SkillDefinition",
    "SkillResource",
    "SkillParseError",
    "parse_frontmatter",
    "SkillLoader",
    # Execution
    "SkillExecutionResult",
    "SkillExecutor",
    "create_chat_model",
    # Tool servers
    "McpClientService",
    "ToolRouter",
]
