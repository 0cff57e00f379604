from pathlib import Path
import subprocess


class FakeGitRunner:
    """Stands in for ``run_git``; records every invocation.

    ``fail_on`` maps a git subcommand (or ``"config safe.directory"``) to the
    stderr it should fail with.
    """

    def __init__(self, remotes: str = "", fail_on: dict[str, str] | None = None):
        self.remotes = remotes
        self.fail_on = fail_on or {}
        self.calls: list[tuple[str, ...]] = []
        self.cwds: list[Path | None] = []

    def _key(self, args: tuple[str, ...]) -> str:
        if args[:2] == ("config", "--local"):
            return "config safe.directory"
        return args[0]

    def __call__(self, *args: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
        self.calls.append(args)
        self.cwds.append(cwd)

        key = self._key(args)
        if key in self.fail_on:
            return subprocess.CompletedProcess(["git", *args], 1, "", self.fail_on[key])

        stdout = self.remotes if args == ("remote",) else ""
        return subprocess.CompletedProcess(["git", *args], 0, stdout, "")

    @property
    def subcommands(self) -> list[str]:
        return [call[0] for call in self.calls]
