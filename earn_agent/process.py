"""Async subprocess helper for the external CLIs (git, gh, code generation)."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Sequence, Tuple, Union

from .errors import CommandError

logger = logging.getLogger(__name__)

READ_CHUNK = 64 * 1024


async def _read_capped(stream: asyncio.StreamReader, limit: Optional[int], label: str) -> bytes:
    chunks = []
    size = 0
    while True:
        chunk = await stream.read(READ_CHUNK)
        if not chunk:
            return b"".join(chunks)
        size += len(chunk)
        if limit is not None and size > limit:
            raise CommandError(f"{label} produced more than {limit} bytes of output")
        chunks.append(chunk)


async def _collect(proc, max_output: Optional[int], label: str) -> Tuple[bytes, bytes]:
    readers = [
        asyncio.ensure_future(_read_capped(stream, max_output, label))
        for stream in (proc.stdout, proc.stderr)
    ]
    try:
        stdout, stderr = await asyncio.gather(*readers)
    except BaseException:
        for reader in readers:
            reader.cancel()
        raise
    await proc.wait()
    return stdout, stderr


async def _kill(proc) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()


async def run_command(
    cmd: str,
    args: Sequence[str],
    cwd: Union[str, Path],
    timeout: float,
    max_output: Optional[int] = None,
    env: Optional[Mapping[str, str]] = None,
) -> str:
    """Run one command to completion and return its stdout.

    Output is read as it arrives; the process is killed as soon as either
    stream passes ``max_output`` bytes.

    Raises:
        CommandError: non-zero exit, timeout, or output larger than max_output
    """
    label = f"{cmd} {' '.join(args[:3])}".strip()
    logger.info(f"Running {label} in {cwd}")

    proc = await asyncio.create_subprocess_exec(
        cmd,
        *args,
        cwd=str(cwd),
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        env=dict(env) if env is not None else dict(os.environ),
    )
    try:
        stdout, stderr = await asyncio.wait_for(
            _collect(proc, max_output, label), timeout=timeout
        )
    except asyncio.TimeoutError:
        await _kill(proc)
        raise CommandError(f"{label} timed out after {timeout:g}s")
    except CommandError:
        await _kill(proc)
        raise

    out = stdout.decode("utf-8", errors="replace")
    err = stderr.decode("utf-8", errors="replace")

    if proc.returncode != 0:
        raise CommandError(
            f"{label} exited with code {proc.returncode}: {err.strip() or out.strip()}",
            err,
        )

    return out
