"""Tests for goship.github.commits and the GitHub client wrapper."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from github.GithubException import GithubException

from goship.github.client import GitHubClient
from goship.github.commits import extract_ticket_ids, get_ticket_ids_from_commits


class TestExtractTicketIds:
    def test_dedup_in_first_appearance_order(self):
        messages = ["[Fixes #10] a", "misc", "[foo #10] dup", "[bar #22] b"]
        assert extract_ticket_ids(messages) == ["10", "22"]

    def test_idempotent(self):
        messages = ["[#3] c", "[#1] a", "[#3] again", "[#2] b"]
        assert extract_ticket_ids(messages) == extract_ticket_ids(messages) == ["3", "1", "2"]

    def test_not_sorted(self):
        assert extract_ticket_ids(["[#900] x", "[#12] y"]) == ["900", "12"]

    def test_bracket_without_ticket(self):
        assert extract_ticket_ids(["[no ticket here]"]) == []

    def test_hash_outside_brackets(self):
        assert extract_ticket_ids(["Fix #42 in parser", "[wip] #43"]) == []

    def test_digits_must_close_bracket(self):
        assert extract_ticket_ids(["[#12a] typo"]) == []

    def test_marker_anywhere_in_message(self):
        assert extract_ticket_ids(["Merge branch\n\n[Finishes #555] checkout"]) == ["555"]

    def test_one_id_per_message(self):
        assert extract_ticket_ids(["[#1] and [#2]"]) == ["2"]

    def test_empty(self):
        assert extract_ticket_ids([]) == []


class TestGetTicketIdsFromCommits:
    def test_compares_current_to_latest(self, github_client):
        ids = get_ticket_ids_from_commits(github_client, "acme", "webapp", "new", "old")
        assert ids == ["10", "22"]
        github_client.compare_commit_messages.assert_called_once_with(
            "acme", "webapp", base="old", head="new"
        )

    def test_no_commits(self, github_client):
        github_client.compare_commit_messages.return_value = []
        assert get_ticket_ids_from_commits(github_client, "acme", "webapp", "a", "a") == []

    def test_github_error_propagates(self, github_client):
        error = GithubException(404, {"message": "Not Found"}, None)
        github_client.compare_commit_messages.side_effect = error
        with pytest.raises(GithubException) as exc:
            get_ticket_ids_from_commits(github_client, "acme", "webapp", "new", "old")
        assert exc.value is error


class TestGitHubClient:
    def _commit(self, message):
        commit = MagicMock()
        commit.commit.message = message
        return commit

    @patch("goship.github.client.Github")
    def test_compare_commit_messages(self, mock_github):
        repo = mock_github.return_value.get_repo.return_value
        repo.compare.return_value.commits = [self._commit("[#1] a"), self._commit(None)]

        client = GitHubClient(token="ghp_test")
        messages = client.compare_commit_messages("acme", "webapp", base="old", head="new")

        assert messages == ["[#1] a", ""]
        mock_github.return_value.get_repo.assert_called_once_with("acme/webapp")
        repo.compare.assert_called_once_with("old", "new")

    @patch("goship.github.client.Github")
    def test_repo_cached(self, mock_github):
        client = GitHubClient(token="ghp_test")
        assert client.repo("acme", "webapp") is client.repo("acme", "webapp")
        mock_github.return_value.get_repo.assert_called_once_with("acme/webapp")
