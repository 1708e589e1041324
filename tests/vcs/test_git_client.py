import subprocess
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from smart_commit.diff.analyzer import DiffAnalyzer
from smart_commit.diff.models import ChangeType
from smart_commit.vcs.git_client import GitClient, GitError


class DummyProc(SimpleNamespace):
    pass


def make_result(stdout: str = "", stderr: str = "", returncode: int = 0):
    return DummyProc(stdout=stdout, stderr=stderr, returncode=returncode)


class TestGitClient(unittest.TestCase):
    def test_find_repo_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / ".git").mkdir()
            nested = root / "a" / "b"
            nested.mkdir(parents=True)
            self.assertEqual(GitClient.find_repo_root(nested), root)

    def test_find_repo_root_none(self) -> None:
        with patch.object(Path, "exists", return_value=False):
            self.assertIsNone(GitClient.find_repo_root(Path("/tmp")))

    def test_run_raises_on_failure(self) -> None:
        client = GitClient(Path("."))
        with patch("subprocess.run", return_value=make_result(stderr="fatal: bad", returncode=128)):
            with self.assertRaisesRegex(GitError, "fatal: bad"):
                client._run(["status"])
        with patch("subprocess.run", return_value=make_result(stderr="x", returncode=1)):
            self.assertEqual(client._run(["status"], check=False).returncode, 1)

    def test_run_raises_when_git_missing(self) -> None:
        client = GitClient(Path("."))
        with patch("subprocess.run", side_effect=FileNotFoundError("git")):
            with self.assertRaises(GitError):
                client._run(["status"])

    def test_get_staged_changes(self) -> None:
        client = GitClient(Path("."))
        stdout = (
            "A\tsrc/new.py\n"
            "M\tsrc/app.py\n"
            "D\told.txt\n"
            "R100\tsrc/a.py\tsrc/b.py\n"
            "R090\tlib/util.py\tsrc/util.py\n"
            "C075\tsrc/app.py\tsrc/copy.py\n"
            "X\tweird\n"
            "\n"
        )
        with patch.object(GitClient, "_run", autospec=True, return_value=make_result(stdout=stdout)) as run:
            records = client.get_staged_changes()
        run.assert_called_once_with(client, ["diff", "--cached", "--name-status", "-M"], check=True)

        summary = [(r.kind, r.before_path, r.after_path, r.renamed) for r in records]
        self.assertEqual(
            summary,
            [
                ("new", None, "src/new.py", False),
                ("modified", "src/app.py", "src/app.py", False),
                ("deleted", "old.txt", None, False),
                ("moved", "src/a.py", "src/b.py", True),
                ("moved", "lib/util.py", "src/util.py", False),
                ("new", None, "src/copy.py", False),
            ],
        )

    def test_loaders_read_head_and_index(self) -> None:
        client = GitClient(Path("."))
        contents = {
            ("show", "HEAD:src/app.py"): "print('old')\n",
            ("show", ":src/app.py"): "print('new')\n",
        }

        def fake_run(self, args, check=True):
            if args[0] == "diff":
                return make_result(stdout="M\tsrc/app.py\n")
            return make_result(stdout=contents[tuple(args)])

        with patch.object(GitClient, "_run", autospec=True, side_effect=fake_run):
            summary = DiffAnalyzer(client.get_staged_changes()).analyze()

        self.assertEqual(summary.total_files, 1)
        fd = summary.file_diffs[0]
        self.assertIs(fd.change_type, ChangeType.MODIFIED)
        self.assertEqual((fd.lines_added, fd.lines_deleted), (1, 1))

    def test_commit(self) -> None:
        client = GitClient(Path("."))
        with patch.object(GitClient, "_run", autospec=True, return_value=make_result()) as run:
            client.commit("Add a\n\nBody")
        run.assert_called_once_with(client, ["commit", "-m", "Add a\n\nBody"], check=True)

    def test_commit_failure(self) -> None:
        client = GitClient(Path("."))
        with patch.object(GitClient, "_run", autospec=True, side_effect=GitError("nothing to commit")):
            with self.assertRaises(GitError):
                client.commit("msg")

    def test_run_uses_repo_root(self) -> None:
        client = GitClient(Path("/repo"))
        with patch("subprocess.run", return_value=make_result(stdout="ok")) as run:
            client._run(["status"])
        args, kwargs = run.call_args
        self.assertEqual(args[0], ["git", "status"])
        self.assertEqual(kwargs["cwd"], Path("/repo"))
        self.assertEqual(kwargs["stdout"], subprocess.PIPE)


if __name__ == "__main__":
    unittest.main()
