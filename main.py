#!/usr/bin/env python3
"""
CadenceBot 音乐机器人

主程序入口点，负责配置加载、机器人初始化和优雅的启动/关闭处理。
"""
import logging

from cadencebot.bot import CadenceBot
from cadencebot.utils.config_manager import ConfigManager
from cadencebot.utils.logger import setup_logger


def main() -> int:
    """
    CadenceBot 主入口函数。

    处理机器人的完整生命周期，包括：
    - 日志系统设置
    - 配置加载和验证
    - 机器人初始化
    - 启动和关闭

    Returns:
        int: 退出代码（0表示成功，1表示错误）
    """
    try:
        config = ConfigManager()
    except FileNotFoundError as e:
        setup_logger()
        logging.getLogger("cadencebot").error(f"❌ 配置文件错误: {e}")
        return 1

    # Set up logging with configuration values
    setup_logger(
        log_level=config.get_log_level(),
        log_file=config.get_log_file(),
        max_size=config.get_log_max_size(),
        backup_count=config.get_log_backup_count()
    )
    logger = logging.getLogger("cadencebot")

    logger.info("=" * 60)
    logger.info("🎵 CadenceBot 音乐机器人启动中...")
    logger.info("=" * 60)
    logger.info("✅ 配置文件加载成功")
    logger.debug(f"日志配置完成 - 级别: {config.get_log_level()}, 文件: {config.get_log_file()}")

    try:
        logger.info("正在获取 Discord 机器人令牌...")
        try:
            discord_token = config.get_discord_token()
            logger.info("✅ Discord 令牌获取成功")
        except ValueError as e:
            logger.error(f"❌ Discord 令牌配置错误: {e}")
            logger.error("请检查 config/config.yaml 文件并确保 Discord 令牌已正确设置")
            return 1

        logger.info("正在初始化音乐机器人...")
        bot = CadenceBot(config)
        logger.info("✅ 音乐机器人初始化成功")

        _log_bot_configuration(logger, config)

        logger.info("🚀 启动音乐机器人...")
        logger.info("按 Ctrl+C 停止机器人")
        bot.run(discord_token)

    except KeyboardInterrupt:
        logger.info("🛑 用户停止了机器人 (Ctrl+C)")
        return 0
    except ValueError as e:
        logger.error(f"❌ 配置错误: {e}")
        return 1
    except Exception as e:
        logger.error(f"❌ 启动音乐机器人时发生意外错误: {e}", exc_info=True)
        return 1

    return 0


def _log_bot_configuration(logger: logging.Logger, config: ConfigManager) -> None:
    """
    记录机器人配置摘要

    Args:
        logger: 日志记录器实例
        config: 配置管理器
    """
    nodes = config.get_lavalink_nodes()
    sync_guild_id = config.get_sync_guild_id()

    logger.info("📋 机器人配置摘要:")
    logger.info(f"   Lavalink 节点: {', '.join(node['uri'] for node in nodes)}")
    logger.info(f"   默认搜索源: {config.get_lavalink_search_source()}")
    logger.info(f"   歌词来源: {config.get_lyrics_provider()}")
    logger.info(f"   歌单文件: {config.get_playlist_file()}")
    logger.info(f"   翻页超时: {config.get_pagination_timeout()} 秒")
    logger.info(f"   命令同步: {'服务器 ' + str(sync_guild_id) if sync_guild_id else '全局'}")
    logger.info("=" * 60)


if __name__ == "__main__":
    exit(main())
