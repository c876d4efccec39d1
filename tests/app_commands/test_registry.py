"""
命令注册与集成测试

测试内容：
- 14个Slash命令全部注册到命令树
- 命令回调构建 Command 并交给路由器
- 翻页按钮通过 on_interaction 监听器分发
- 命令树错误处理
"""

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, Mock
import discord
from discord import app_commands
from discord.ext import commands

from cadencebot.app_commands import AppCommandsIntegration
from cadencebot.app_commands.core import COMMAND_DESCRIPTIONS, CommandRegistry, CommandRouter, ServiceProvider
from cadencebot.app_commands.core.registry import FILTER_CHOICES
from cadencebot.audio.filter_presets import available_filter_names
from cadencebot.lyrics.lyrics_manager import LyricsManager
from cadencebot.ui.pagination_cache import NavigationToken, PageDirection
from fakes import FakeLyricsProvider, USER_ID, last_reply, make_interaction


def make_bot() -> commands.Bot:
    return commands.Bot(command_prefix="!", intents=discord.Intents.default(), help_command=None)


def make_registry(bot, mock_config, audio_client, playlist_store):
    service_provider = ServiceProvider(
        mock_config,
        audio_client,
        playlist_store,
        lyrics_manager=LyricsManager(FakeLyricsProvider())
    )
    router = Mock(spec=CommandRouter)
    router.dispatch = AsyncMock()
    return CommandRegistry(bot, service_provider, router), router


class TestCommandRegistry:
    """测试命令注册器"""

    @pytest.mark.asyncio
    async def test_registers_every_command(self, mock_config, audio_client, playlist_store):
        bot = make_bot()
        registry, _ = make_registry(bot, mock_config, audio_client, playlist_store)

        registry.register_all()

        assert sorted(registry.get_registered_commands()) == sorted(COMMAND_DESCRIPTIONS)
        for name, description in COMMAND_DESCRIPTIONS.items():
            assert bot.tree.get_command(name).description == description

    @pytest.mark.asyncio
    async def test_filter_choices(self, mock_config, audio_client, playlist_store):
        bot = make_bot()
        registry, _ = make_registry(bot, mock_config, audio_client, playlist_store)
        registry.register_all()

        parameter = bot.tree.get_command("filter").get_parameter("filter")

        assert [choice.value for choice in parameter.choices] == list(available_filter_names())
        assert parameter.required
        assert FILTER_CHOICES[0].name == "None"

    @pytest.mark.asyncio
    async def test_optional_and_ranged_parameters(self, mock_config, audio_client, playlist_store):
        bot = make_bot()
        registry, _ = make_registry(bot, mock_config, audio_client, playlist_store)
        registry.register_all()

        assert not bot.tree.get_command("lyrics").get_parameter("query").required
        index = bot.tree.get_command("playlist_remove").get_parameter("index")
        assert index.min_value == 1

    @pytest.mark.asyncio
    async def test_callback_dispatches_command(self, mock_config, audio_client, playlist_store):
        bot = make_bot()
        registry, router = make_registry(bot, mock_config, audio_client, playlist_store)
        registry.register_all()
        interaction = make_interaction()

        await bot.tree.get_command("playlist_add").callback(interaction, name="mix", query="song")

        router.dispatch.assert_awaited_once()
        dispatched_interaction, command = router.dispatch.await_args.args
        assert dispatched_interaction is interaction
        assert command.name == "playlist_add"
        assert command.caller_user_id == str(USER_ID)
        assert command.args == {"name": "mix", "query": "song"}

    @pytest.mark.asyncio
    async def test_lyrics_without_query(self, mock_config, audio_client, playlist_store):
        bot = make_bot()
        registry, router = make_registry(bot, mock_config, audio_client, playlist_store)
        registry.register_all()

        await bot.tree.get_command("lyrics").callback(make_interaction())

        command = router.dispatch.await_args.args[1]
        assert command.args == {}

    @pytest.mark.asyncio
    async def test_broken_interaction_gets_error_reply(self, mock_config, audio_client, playlist_store):
        bot = make_bot()
        registry, router = make_registry(bot, mock_config, audio_client, playlist_store)
        registry.register_all()
        interaction = make_interaction()
        interaction.user = None

        await bot.tree.get_command("help").callback(interaction)

        router.dispatch.assert_not_awaited()
        embed = interaction.response.send_message.call_args.kwargs["embed"]
        assert embed.description == "An error occurred while executing the command."
        assert interaction.response.send_message.call_args.kwargs["ephemeral"] is True

    @pytest.mark.asyncio
    async def test_guild_sync_copies_global_commands(self, mock_config, audio_client, playlist_store):
        bot = Mock()
        bot.tree.sync = AsyncMock(return_value=[Mock(), Mock()])
        registry, _ = make_registry(bot, mock_config, audio_client, playlist_store)
        guild = discord.Object(id=424242)

        await registry.sync_commands(guild)

        bot.tree.copy_global_to.assert_called_once_with(guild=guild)
        bot.tree.sync.assert_awaited_once_with(guild=guild)

    @pytest.mark.asyncio
    async def test_global_sync(self, mock_config, audio_client, playlist_store):
        bot = Mock()
        bot.tree.sync = AsyncMock(return_value=[])
        registry, _ = make_registry(bot, mock_config, audio_client, playlist_store)

        await registry.sync_commands()

        bot.tree.copy_global_to.assert_not_called()
        bot.tree.sync.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_unregister_all(self, mock_config, audio_client, playlist_store):
        bot = make_bot()
        registry, _ = make_registry(bot, mock_config, audio_client, playlist_store)
        registry.register_all()

        registry.unregister_all()

        assert registry.get_registered_commands() == []


class TestAppCommandsIntegration:
    """测试App Commands集成器"""

    @pytest_asyncio.fixture
    async def integration(self, mock_config, audio_client, playlist_store, pagination_cache, lyrics_provider):
        lyrics_provider.lyrics = "\n".join("x" * 99 for _ in range(90))
        integration = AppCommandsIntegration(
            make_bot(),
            mock_config,
            audio_client,
            playlist_store,
            pagination_cache=pagination_cache,
            lyrics_manager=LyricsManager(lyrics_provider)
        )
        await integration.setup()
        yield integration
        await integration.cleanup()

    async def _send_lyrics(self, integration):
        interaction = make_interaction(interaction_id=777)
        await integration.bot.tree.get_command("lyrics").callback(interaction, query="Long Song")
        return interaction

    @pytest.mark.asyncio
    async def test_setup_registers_commands(self, integration):
        assert sorted(integration.command_registry.get_registered_commands()) == sorted(COMMAND_DESCRIPTIONS)
        assert set(integration.router.command_names) == set(COMMAND_DESCRIPTIONS)

    @pytest.mark.asyncio
    async def test_owner_navigates_to_next_page(self, integration):
        await self._send_lyrics(integration)
        custom_id = NavigationToken(PageDirection.NEXT, "777", str(USER_ID), 0).encode()
        press = make_interaction(custom_id=custom_id)

        await integration.on_interaction(press)

        press.response.edit_message.assert_awaited_once()
        kwargs = press.response.edit_message.await_args.kwargs
        assert kwargs["embed"].footer.text == "Page 2 of 3"
        assert not kwargs["view"].previous_button.disabled
        assert not kwargs["view"].next_button.disabled
        assert integration.pagination_cache.get("777").page == 1

    @pytest.mark.asyncio
    async def test_other_user_is_rejected(self, integration):
        await self._send_lyrics(integration)
        custom_id = NavigationToken(PageDirection.NEXT, "777", str(USER_ID), 0).encode()
        press = make_interaction(user_id=11111, custom_id=custom_id)

        await integration.on_interaction(press)

        press.response.edit_message.assert_not_called()
        embed, ephemeral, _ = last_reply(press)
        assert embed.description == "This interaction is not for you or has expired."
        assert ephemeral is True
        assert integration.pagination_cache.get("777").page == 0

    @pytest.mark.asyncio
    async def test_expired_entry(self, integration, clock):
        await self._send_lyrics(integration)
        clock.advance(300)
        custom_id = NavigationToken(PageDirection.NEXT, "777", str(USER_ID), 0).encode()
        press = make_interaction(custom_id=custom_id)

        await integration.on_interaction(press)

        press.response.edit_message.assert_not_called()
        assert last_reply(press)[0].description == "This interaction is not for you or has expired."

    @pytest.mark.asyncio
    async def test_ignores_other_components(self, integration):
        press = make_interaction(custom_id="queue:refresh")

        await integration.on_interaction(press)

        press.response.send_message.assert_not_called()
        press.response.edit_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_ignores_slash_commands(self, integration):
        interaction = make_interaction()

        await integration.on_interaction(interaction)

        interaction.response.send_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_tree_error_is_answered(self, integration):
        interaction = make_interaction()
        interaction.command = Mock()
        interaction.command.name = "play"
        error = app_commands.CommandInvokeError(interaction.command, RuntimeError("boom"))

        await integration.on_app_command_error(interaction, error)

        embed, ephemeral, _ = last_reply(interaction)
        assert embed.description == "An error occurred while executing the command."
        assert ephemeral is True
        assert integration.error_handler.get_error_stats() == {"RuntimeError": 1}

    @pytest.mark.asyncio
    async def test_cleanup_clears_cache(self, integration):
        await self._send_lyrics(integration)
        assert len(integration.pagination_cache) == 1

        await integration.cleanup()

        assert len(integration.pagination_cache) == 0
        assert integration.command_registry.get_registered_commands() == []
