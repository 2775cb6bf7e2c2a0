from typing import AsyncIterator, List
from collections import deque
from contextlib import suppress
import asyncio
import logging
import shutil
from vidrelay.config.settings import config
from vidrelay.core.state import state

STDERR_MAX_LINES = 50

logger = logging.getLogger(__name__)

class ExtractionError(Exception):
    """yt-dlp exited with a non-zero status"""

    def __init__(self, returncode: int, stderr: str):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"yt-dlp exited with {returncode}: {stderr[:200]}")

class SubprocessExecutor:
    """Execute yt-dlp with consistent error handling"""

    @staticmethod
    async def run(cmd: List[str], timeout: float) -> bytes:
        """
        Run to completion and return stdout.
        Raises ExtractionError with the stderr tail on non-zero exit,
        asyncio.TimeoutError after killing a process that overran.
        """
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            stdin=asyncio.subprocess.DEVNULL
        )

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        finally:
            if process.returncode is None:
                process.kill()
                await process.wait()

        if process.returncode != 0:
            lines = stderr.decode(errors="replace").strip().splitlines()
            raise ExtractionError(process.returncode, '\n'.join(lines[-STDERR_MAX_LINES:]))

        return stdout

    @staticmethod
    async def stream(cmd: List[str], chunk_size: int) -> AsyncIterator[bytes]:
        """
        Yield stdout chunks of a running subprocess.
        Raises ExtractionError with the stderr tail on non-zero exit.
        The process is killed if the consumer stops early.
        """
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            stdin=asyncio.subprocess.DEVNULL
        )

        stderr_lines = deque(maxlen=STDERR_MAX_LINES)

        async def drain_stderr():
            """Drain stderr to prevent buffer deadlock"""
            while True:
                line = await process.stderr.readline()
                if not line:
                    break
                stderr_lines.append(line.decode(errors="replace").strip())

        stderr_task = asyncio.create_task(drain_stderr())

        try:
            while True:
                chunk = await process.stdout.read(chunk_size)
                if not chunk:
                    break
                yield chunk

            returncode = await process.wait()
            with suppress(asyncio.CancelledError):
                await stderr_task

            if returncode != 0:
                raise ExtractionError(returncode, '\n'.join(stderr_lines))
        finally:
            if process.returncode is None:
                process.kill()
                await process.wait()
            if not stderr_task.done():
                stderr_task.cancel()
                with suppress(asyncio.CancelledError):
                    await stderr_task

class YTDLPCommandBuilder:
    """Build yt-dlp commands"""

    @staticmethod
    def _common_options() -> List[str]:
        cmd = [
            '--no-playlist',
            '--socket-timeout', str(config.download.socket_timeout),
            '--retries', str(config.download.retries),
        ]

        if not config.ytdlp.enable_live_streams:
            cmd.extend(['--match-filter', '!is_live'])

        if state.js_runtime:
            cmd.extend(['--js-runtimes', state.js_runtime])

        return cmd

    @staticmethod
    def build_info_command(url: str) -> List[str]:
        """Build command for fetching video info"""
        cmd = [config.ytdlp.binary, '--dump-json']
        cmd.extend(YTDLPCommandBuilder._common_options())
        cmd.extend(['--', url])
        return cmd

    @staticmethod
    def build_stream_command(url: str, format_id: str) -> List[str]:
        """Build command that writes a single format to stdout"""
        cmd = [
            config.ytdlp.binary,
            '-f', format_id,
            '-o', '-',
        ]
        cmd.extend(YTDLPCommandBuilder._common_options())

        # Keep stdout clean for binary output
        cmd.extend(['--no-progress', '--quiet', '--no-part'])
        cmd.extend(['--', url])
        return cmd

    @staticmethod
    def build_version_command() -> List[str]:
        return [config.ytdlp.binary, '--version']

async def detect_runtime() -> None:
    """Record yt-dlp version and JS runtime into runtime state"""
    try:
        stdout = await SubprocessExecutor.run(YTDLPCommandBuilder.build_version_command(), timeout=10.0)
        state.ytdlp_version = stdout.decode().strip()
    except (ExtractionError, OSError, asyncio.TimeoutError) as e:
        logger.warning(f"yt-dlp not available: {e}")

    if config.ytdlp.js_runtime:
        state.js_runtime = config.ytdlp.js_runtime
    elif config.ytdlp.auto_detect_runtime:
        deno = shutil.which("deno")
        if deno:
            state.js_runtime = f"deno:{deno}"

    logger.info(f"yt-dlp {state.ytdlp_version}, JS runtime: {state.js_runtime or 'none'}")
