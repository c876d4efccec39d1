"""Configuration manager for CadenceBot."""
import logging
import os
from typing import Any, Dict, List, Optional
import yaml


DEFAULT_LAVALINK_NODE = {
    "uri": "http://localhost:2333",
    "password": "youshallnotpass",
    "identifier": "main"
}


class ConfigManager:
    """
    Configuration manager for CadenceBot.

    Handles loading and accessing configuration values from the config file.
    """

    def __init__(self, config_path: str = "config/config.yaml"):
        """
        Initialize the ConfigManager.

        Args:
            config_path: Path to the configuration file

        Raises:
            FileNotFoundError: If the configuration file does not exist
            yaml.YAMLError: If the configuration file is not valid YAML
        """
        self.logger = logging.getLogger("cadencebot.config")
        self.config_path = config_path
        self.config: Dict[str, Any] = {}

        self._load_config()

    def _load_config(self) -> None:
        """
        Load the configuration from the config file.

        Raises:
            FileNotFoundError: If the configuration file does not exist
            yaml.YAMLError: If the configuration file is not valid YAML
        """
        if not os.path.exists(self.config_path):
            example_path = f"{self.config_path}.example"
            if os.path.exists(example_path):
                self.logger.error(
                    f"Configuration file {self.config_path} not found. "
                    f"Please copy {example_path} to {self.config_path} and update it."
                )
            else:
                self.logger.error(f"Configuration file {self.config_path} not found.")
            raise FileNotFoundError(f"Configuration file {self.config_path} not found")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as config_file:
                self.config = yaml.safe_load(config_file) or {}
                self.logger.debug(f"Loaded configuration from {self.config_path}")
        except yaml.YAMLError as e:
            self.logger.error(f"Error parsing configuration file: {e}")
            raise

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: The configuration key (dot notation for nested keys)
            default: Default value to return if the key is not found

        Returns:
            The configuration value or the default value if not found
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                self.logger.debug(f"Configuration key '{key}' not found, using default: {default}")
                return default

        return value

    def get_discord_token(self) -> str:
        """
        Get the Discord bot token.

        Returns:
            The Discord bot token

        Raises:
            ValueError: If the Discord bot token is not set
        """
        token = self.get('discord.token')
        if not token or token == "YOUR_DISCORD_BOT_TOKEN_HERE":
            self.logger.error("Discord bot token not set in configuration")
            raise ValueError("Discord bot token not set in configuration")
        return token

    def get_command_prefix(self) -> str:
        return self.get('discord.command_prefix', '!')

    def get_sync_guild_id(self) -> Optional[int]:
        """
        Get the guild used for instant command sync during development.

        Returns:
            The guild ID, or None to sync globally
        """
        guild_id = self.get('discord.sync_guild_id')
        return int(guild_id) if guild_id else None

    def get_lavalink_nodes(self) -> List[Dict[str, Any]]:
        """
        Get the Lavalink node definitions.

        Returns:
            A list of node dicts with uri, password and identifier
        """
        nodes = self.get('lavalink.nodes')
        if not nodes:
            self.logger.warning("No Lavalink nodes configured, using the local default node")
            return [dict(DEFAULT_LAVALINK_NODE)]

        normalized = []
        for index, node in enumerate(nodes):
            if not isinstance(node, dict) or not node.get('uri'):
                raise ValueError(f"Lavalink node #{index + 1} must define a uri")
            normalized.append({
                "uri": node['uri'],
                "password": node.get('password', DEFAULT_LAVALINK_NODE['password']),
                "identifier": node.get('identifier') or f"node-{index + 1}"
            })
        return normalized

    def get_lavalink_search_source(self) -> str:
        """
        Get the search prefix used for plain-text queries.

        Returns:
            The Lavalink search source (e.g. ytmsearch, ytsearch, scsearch)
        """
        return self.get('lavalink.default_search_source', 'ytmsearch')

    def get_lyrics_provider(self) -> str:
        """
        Get the configured lyrics provider.

        Returns:
            Either "genius" or "lrclib"
        """
        provider = str(self.get('lyrics.provider', 'genius')).lower()
        if provider not in ('genius', 'lrclib'):
            self.logger.warning(f"Unknown lyrics provider '{provider}', falling back to lrclib")
            return 'lrclib'
        return provider

    def get_genius_token(self) -> Optional[str]:
        token = self.get('lyrics.genius_token')
        if not token or token == "YOUR_GENIUS_API_TOKEN_HERE":
            return None
        return token

    def get_lrclib_url(self) -> str:
        return self.get('lyrics.lrclib_url', 'https://lrclib.net')

    def get_lyrics_page_size(self) -> int:
        """
        Get the maximum number of characters per lyrics page.

        Returns:
            The page size, capped at the Discord embed description limit
        """
        return max(1, min(int(self.get('lyrics.page_size', 4000)), 4000))

    def get_lyrics_timeout(self) -> float:
        return float(self.get('lyrics.timeout', 15))

    def get_playlist_file(self) -> str:
        return self.get('playlists.file', 'data/playlists.json')

    def get_pagination_timeout(self) -> float:
        """
        Get the lifetime of a paginated lyrics message.

        Returns:
            The timeout in seconds
        """
        return float(self.get('pagination.timeout', 300))

    def get_log_level(self) -> str:
        """
        Get the logging level.

        Returns:
            The logging level
        """
        return self.get('logging.level', 'INFO')

    def get_log_file(self) -> Optional[str]:
        """
        Get the log file path.

        Returns:
            The log file path or None if not set
        """
        return self.get('logging.file', None)

    def get_log_max_size(self) -> int:
        """
        Get the maximum log file size.

        Returns:
            The maximum log file size in bytes
        """
        return self.get('logging.max_size', 10485760)  # 10 MB

    def get_log_backup_count(self) -> int:
        """
        Get the number of backup log files to keep.

        Returns:
            The number of backup log files
        """
        return self.get('logging.backup_count', 5)
