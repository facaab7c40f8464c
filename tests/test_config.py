"""Tests for branchdawg.config."""

from branchdawg.config import configured_default_branch, default_branch_name
from branchdawg.repo import open_repo


class TestDefaultBranchName:
    def test_explicit_name_wins(self, tmp_repo) -> None:
        tmp_repo.git("config", "init.defaultBranch", "trunk")
        repo = open_repo(tmp_repo.path)

        assert default_branch_name(repo, "develop") == "develop"

    def test_reads_init_default_branch(self, tmp_repo) -> None:
        """The repository's init.defaultBranch is used when no name is given."""
        tmp_repo.git("config", "init.defaultBranch", "trunk")
        repo = open_repo(tmp_repo.path)

        assert configured_default_branch(repo) == "trunk"
        assert default_branch_name(repo) == "trunk"

    def test_falls_back_to_main(self, tmp_repo) -> None:
        repo = open_repo(tmp_repo.path)

        assert configured_default_branch(repo) is None
        assert default_branch_name(repo) == "main"

    def test_empty_value_counts_as_unset(self, tmp_repo) -> None:
        tmp_repo.git("config", "init.defaultBranch", "")
        repo = open_repo(tmp_repo.path)

        assert default_branch_name(repo) == "main"

    def test_value_is_kept_verbatim(self, tmp_repo) -> None:
        """Numeric- or boolean-looking branch names are not converted."""
        repo_path = tmp_repo.path
        for name in ("007", "1.10", "yes"):
            tmp_repo.git("config", "init.defaultBranch", name)

            assert default_branch_name(open_repo(repo_path)) == name

    def test_system_config_is_not_consulted(self, tmp_repo) -> None:
        """Only user, global and repository config feed the tests."""
        assert "system" not in open_repo(tmp_repo.path).config_level
