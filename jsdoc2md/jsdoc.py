"""
Annotation extraction via the jsdoc command-line tool.

jsdoc is run in explain mode (``-X``), which prints every doclet it finds as
a JSON array. The doclets are returned unchanged. Inline source text is
written to a temporary file first. Results are memoised in a Cache keyed
by the input file contents, the options and the jsdoc version.
"""

from __future__ import annotations

import asyncio
import contextlib
import glob
import json
import logging
import os
import shlex
import shutil
import subprocess
import tempfile

from .cache import Cache, default_cache_dir

log = logging.getLogger(__name__)

_HTML_CONF = {
    "source": {"includePattern": r".+\.(js(doc|x)?|html?)$"},
    "plugins": [],
}


class JsdocError(RuntimeError):
    """Raised when jsdoc cannot be run or reports a failure."""


class InvalidFilesError(JsdocError):
    """Raised when one or more ``files`` patterns match nothing."""


def _default_command():
    env = os.environ.get("JSDOC2MD_JSDOC")
    if env:
        return shlex.split(env)
    return ["jsdoc"]


def expand_files(patterns):
    files = []
    missing = []
    for pattern in patterns:
        matches = sorted(glob.glob(pattern, recursive=True))
        matches = [m for m in matches if os.path.isfile(m)]
        if not matches:
            missing.append(pattern)
        for m in matches:
            if m not in files:
                files.append(m)
    if missing:
        raise InvalidFilesError("These files do not exist: " + ", ".join(missing))
    return files


def _read_bytes(path):
    with open(path, "rb") as f:
        return f.read().decode("utf-8", errors="replace")


class JsdocExplainer:
    def __init__(self, command=None, cache=None):
        if command is None:
            command = _default_command()
        elif isinstance(command, str):
            command = shlex.split(command)
        self.command = list(command)
        self.cache = cache if cache is not None else Cache(default_cache_dir("jsdoc"))
        self._version = None

    # ── command construction ──

    def _executable(self):
        exe = shutil.which(self.command[0])
        if exe is None:
            raise JsdocError(
                f"jsdoc executable not found: {self.command[0]!r} "
                "(install it with `npm install -g jsdoc` or set JSDOC2MD_JSDOC)"
            )
        return [exe, *self.command[1:]]

    def version(self):
        if self._version is None:
            result = subprocess.run(
                [*self._executable(), "--version"],
                capture_output=True,
                text=True,
            )
            self._version = result.stdout.strip()
        return self._version

    def _validate(self, options):
        if not (options.files or options.source):
            raise JsdocError("Must set either .files or .source")
        return expand_files(options.files) if options.files else []

    def _cache_key(self, options, files):
        contents = [_read_bytes(f) for f in files]
        return Cache.key(contents, options.source, options.to_dict(), self.version())

    @contextlib.contextmanager
    def _argv(self, options, files):
        argv = [*self._executable(), "-X"]
        tmpfiles = []
        try:
            configure = options.configure
            if options.html and not configure:
                configure = self._write_tmp(json.dumps(_HTML_CONF), ".json")
                tmpfiles.append(configure)
            if configure:
                argv += ["-c", configure]
            argv += files
            if options.source:
                src = self._write_tmp(options.source, ".js")
                tmpfiles.append(src)
                argv.append(src)
            yield argv
        finally:
            for p in tmpfiles:
                try:
                    os.remove(p)
                except OSError:
                    pass

    @staticmethod
    def _write_tmp(text, suffix):
        fd, path = tempfile.mkstemp(prefix="jsdoc2md-", suffix=suffix)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    @staticmethod
    def _decode(returncode, stdout, stderr):
        if returncode != 0:
            raise JsdocError(stderr.strip() or f"jsdoc exited with status {returncode}")
        try:
            data = json.loads(stdout)
        except ValueError as exc:
            raise JsdocError(f"jsdoc produced invalid JSON: {exc}\n{stderr.strip()}") from exc
        if not isinstance(data, list):
            raise JsdocError("jsdoc explain output is not a list")
        return data

    # ── explain ──

    def explain_sync(self, options):
        """Return the jsdoc doclets for ``options`` (a JsdocOptions)."""
        files = self._validate(options)
        key = None
        if options.cache:
            key = self._cache_key(options, files)
            cached = self.cache.read(key)
            if cached is not None:
                return cached

        with self._argv(options, files) as argv:
            log.debug("jsdoc2md: running %s", " ".join(argv))
            result = subprocess.run(argv, capture_output=True, text=True)
        data = self._decode(result.returncode, result.stdout, result.stderr)

        if key is not None:
            self.cache.write(key, data)
        return data

    async def explain(self, options):
        files = self._validate(options)
        loop = asyncio.get_running_loop()
        key = None
        if options.cache:
            key = await loop.run_in_executor(None, self._cache_key, options, files)
            cached = await loop.run_in_executor(None, self.cache.read, key)
            if cached is not None:
                return cached

        with self._argv(options, files) as argv:
            log.debug("jsdoc2md: running %s", " ".join(argv))
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await proc.communicate()
        data = self._decode(
            proc.returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

        if key is not None:
            await loop.run_in_executor(None, self.cache.write, key, data)
        return data
