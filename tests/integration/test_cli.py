"""Integration tests for the bytebardctl command-line interface.

Commands run through Typer's CliRunner with the HTTP transport replaced by
the echo transport, so each test checks both the request that reached the
"network" and what the user saw.
"""

import json

import pytest
from typer.testing import CliRunner

from bytebardctl import __version__
from bytebardctl import app as app_module
from bytebardctl.app import app, register_commands

register_commands()

BASE = "https://bytebard.co/api/blog?action="


@pytest.fixture
def runner(monkeypatch):
    # Long temp paths in messages must not be wrapped by rich
    monkeypatch.setattr(app_module.console, "width", 240)
    return CliRunner()


@pytest.fixture
def cli_transport(transport, monkeypatch):
    """Route every client the CLI builds through the echo transport."""
    monkeypatch.setattr("bytebardctl.client.RequestsTransport", lambda timeout=30: transport)
    return transport


@pytest.fixture
def env_key(monkeypatch):
    monkeypatch.setenv("BYTEBARD_API_KEY", "env-key")
    return "env-key"


class TestGlobalOptions:
    """Tests for options on the main callback."""

    def test_version(self, runner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"bytebardctl {__version__}" in result.output

    def test_unknown_output_format(self, runner, env_key):
        result = runner.invoke(app, ["-o", "xml", "posts", "list"])
        assert result.exit_code == 2
        assert "Unknown output format" in result.output

    def test_missing_configuration(self, runner, cli_transport):
        result = runner.invoke(app, ["posts", "list"])

        assert result.exit_code == 1
        assert "No ByteBard configuration found" in result.output
        assert cli_transport.requests == []

    def test_unknown_profile(self, runner):
        result = runner.invoke(app, ["--profile", "missing", "posts", "list"])
        assert result.exit_code == 1
        assert "Profile 'missing' not found" in result.output

    def test_dry_run_sends_nothing(self, runner, cli_transport, env_key):
        result = runner.invoke(app, ["--dry-run", "posts", "list", "--limit", "5"])

        assert result.exit_code == 0
        assert "DRY RUN: Would send GET /blog?action=list-posts&limit=5" in result.output
        assert cli_transport.requests == []


class TestPostsCommands:
    """Tests for the posts command group."""

    def test_list(self, runner, cli_transport, env_key):
        cli_transport.queue({"posts": [{"id": "1", "slug": "a", "title": "A"}]})

        result = runner.invoke(app, ["-o", "json", "posts", "list", "--limit", "10", "--page", "2"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"posts": [{"id": "1", "slug": "a", "title": "A"}]}
        assert cli_transport.last["url"] == BASE + "list-posts&limit=10&page=2"
        assert cli_transport.last["headers"]["x-api-key"] == "env-key"

    def test_list_all_pages(self, runner, cli_transport, env_key):
        cli_transport.queue({"posts": [{"id": "1"}]})
        cli_transport.queue({"posts": [{"id": "2"}]})
        cli_transport.queue({"posts": []})

        result = runner.invoke(app, ["-o", "json", "posts", "list", "--all"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"posts": [{"id": "1"}, {"id": "2"}]}
        assert len(cli_transport.requests) == 3

    def test_get_by_slug(self, runner, cli_transport, env_key):
        cli_transport.queue({"id": "9", "slug": "hello"})

        result = runner.invoke(app, ["-o", "json", "posts", "get", "--slug", "hello"])

        assert result.exit_code == 0
        assert cli_transport.last["url"] == BASE + "get-post&slug=hello"

    def test_get_requires_id_or_slug(self, runner, cli_transport, env_key):
        result = runner.invoke(app, ["posts", "get"])

        assert result.exit_code == 1
        assert "Pass either a post ID or --slug" in result.output
        assert cli_transport.requests == []

    def test_create_without_autopost(self, runner, cli_transport, env_key, tmp_path):
        content = tmp_path / "post.html"
        content.write_text("<p>Body</p>", encoding="utf-8")
        cli_transport.queue({"id": "new", "slug": "hello"})

        result = runner.invoke(app, [
            "-o", "json", "posts", "create",
            "--title", "Hello",
            "--file", str(content),
            "--slug", "hello",
            "--no-autopost",
        ])

        assert result.exit_code == 0
        assert cli_transport.last["method"] == "POST"
        assert cli_transport.last_json() == {
            "title": "Hello",
            "content": "<p>Body</p>",
            "slug": "hello",
            "autopost": False,
        }

    def test_update(self, runner, cli_transport, env_key):
        cli_transport.queue({"success": True})

        result = runner.invoke(app, ["-o", "json", "posts", "update", "123", "--title", "B"])

        assert result.exit_code == 0
        assert cli_transport.last_json() == {"id": "123", "title": "B"}

    def test_update_needs_a_field(self, runner, cli_transport, env_key):
        result = runner.invoke(app, ["posts", "update", "123"])
        assert result.exit_code == 1
        assert cli_transport.requests == []

    def test_api_failure_exits_nonzero(self, runner, cli_transport, env_key):
        cli_transport.queue({"success": False, "error": "post not found"})

        result = runner.invoke(app, ["-o", "json", "posts", "update", "404", "--title", "X"])

        assert result.exit_code == 1
        assert "post not found" in result.output

    def test_delete_force(self, runner, cli_transport, env_key):
        cli_transport.queue({"success": True})

        result = runner.invoke(app, ["-o", "json", "posts", "delete", "42", "--force"])

        assert result.exit_code == 0
        assert cli_transport.last["method"] == "DELETE"
        assert "action=remove-post&id=42" in cli_transport.last["url"]

    def test_delete_cancelled(self, runner, cli_transport, env_key):
        result = runner.invoke(app, ["posts", "delete", "42"], input="n\n")

        assert result.exit_code == 0
        assert "Delete cancelled" in result.output
        assert cli_transport.requests == []

    def test_import_in_batches(self, runner, cli_transport, env_key, tmp_path):
        posts_file = tmp_path / "posts.json"
        posts_file.write_text(json.dumps({"posts": [{"title": f"Post {i}"} for i in range(250)]}))
        for inserted in (100, 100, 50):
            cli_transport.queue({"success": True, "error": "no errors", "inserted": inserted})

        result = runner.invoke(app, ["-o", "json", "posts", "import", str(posts_file)])

        assert result.exit_code == 0
        sizes = [len(json.loads(request["body"])["posts"]) for request in cli_transport.requests]
        assert sizes == [100, 100, 50]
        assert '"inserted": 250' in result.output

    def test_import_rejects_oversized_batch_option(self, runner, env_key, tmp_path):
        posts_file = tmp_path / "posts.json"
        posts_file.write_text("[]")

        result = runner.invoke(app, ["posts", "import", str(posts_file), "--batch-size", "101"])

        assert result.exit_code == 2

    def test_import_partial_failure(self, runner, cli_transport, env_key, tmp_path):
        posts_file = tmp_path / "posts.json"
        posts_file.write_text(json.dumps([{"title": "a"}, {"title": "b"}]))
        cli_transport.queue({"success": True, "inserted": 1})
        cli_transport.queue({"success": False, "error": "duplicate slug"})

        result = runner.invoke(app, ["posts", "import", str(posts_file), "--batch-size", "1"])

        assert result.exit_code == 1
        assert "1/2 batches accepted" in result.output

    def test_import_invalid_file(self, runner, cli_transport, env_key, tmp_path):
        posts_file = tmp_path / "posts.json"
        posts_file.write_text('{"title": "not a list"}')

        result = runner.invoke(app, ["posts", "import", str(posts_file)])

        assert result.exit_code == 1
        assert "must contain a list of post objects" in result.output


class TestFilesCommands:
    """Tests for the files command group."""

    def test_list_with_cursor(self, runner, cli_transport, env_key):
        cli_transport.queue({"files": ["images/c.webp"]})

        result = runner.invoke(app, [
            "-o", "json", "files", "list", "--folder", "images", "--limit", "1", "--next-file", "images/b.webp",
        ])

        assert result.exit_code == 0
        assert cli_transport.last["url"] == BASE + "list-files&folder=images&limit=1&nextFile=images%2Fb.webp"

    def test_list_unknown_folder(self, runner, cli_transport, env_key):
        result = runner.invoke(app, ["files", "list", "--folder", "videos"])

        assert result.exit_code == 1
        assert "Unknown folder" in result.output
        assert cli_transport.requests == []

    def test_upload(self, runner, cli_transport, env_key, tmp_path):
        image = tmp_path / "photo.jpg"
        image.write_bytes(b"\xff\xd8\xff\xe0JFIF")
        cli_transport.queue({"success": True, "fileName": "hero.jpg"})

        result = runner.invoke(app, ["-o", "json", "files", "upload", str(image), "--name", "hero.jpg"])

        assert result.exit_code == 0
        request = cli_transport.last
        assert request["url"] == BASE + "upload-file&fileName=hero.jpg"
        assert request["body"] == b"\xff\xd8\xff\xe0JFIF"
        assert request["headers"]["Content-Length"] == "8"

    def test_upload_rejects_other_types(self, runner, cli_transport, env_key, tmp_path):
        text = tmp_path / "notes.txt"
        text.write_text("hi")

        result = runner.invoke(app, ["files", "upload", str(text)])

        assert result.exit_code == 1
        assert "Upload WebP or JPEG" in result.output

    def test_delete(self, runner, cli_transport, env_key):
        cli_transport.queue({"success": True})

        result = runner.invoke(app, ["-o", "json", "files", "delete", "images", "old.webp", "--force"])

        assert result.exit_code == 0
        assert cli_transport.last["method"] == "DELETE"
        assert cli_transport.last["url"] == BASE + "remove-file&folder=images&name=old.webp"


class TestSiteCommands:
    """Tests for the site command group."""

    def test_full_reindex(self, runner, cli_transport, env_key):
        cli_transport.queue({"success": True})

        result = runner.invoke(app, ["-o", "json", "site", "reindex"])

        assert result.exit_code == 0
        assert cli_transport.last["url"] == BASE + "reindex"
        assert cli_transport.last["body"] is None

    def test_reindex_urls(self, runner, cli_transport, env_key):
        cli_transport.queue({"success": True})

        result = runner.invoke(app, ["-o", "json", "site", "reindex", "https://blog.example.com/a"])

        assert result.exit_code == 0
        assert cli_transport.last_json() == {"urls": ["https://blog.example.com/a"]}


class TestConfigCommands:
    """Tests for the config command group and profile selection."""

    def test_init_and_use_profile(self, runner, cli_transport):
        result = runner.invoke(app, ["config", "init", "--name", "work", "--api-key", "work-key"])
        assert result.exit_code == 0
        assert "saved and set as default" in result.output

        cli_transport.queue({"posts": []})
        result = runner.invoke(app, ["-o", "json", "posts", "list"])

        assert result.exit_code == 0
        assert cli_transport.last["headers"]["x-api-key"] == "work-key"

    def test_select_profile_by_name(self, runner, cli_transport):
        runner.invoke(app, ["config", "init", "--name", "work", "--api-key", "work-key"])
        runner.invoke(app, ["config", "init", "--name", "home", "--api-key", "home-key"])

        cli_transport.queue({"posts": []})
        result = runner.invoke(app, ["-o", "json", "--profile", "home", "posts", "list"])

        assert result.exit_code == 0
        assert cli_transport.last["headers"]["x-api-key"] == "home-key"

    def test_init_duplicate_needs_force(self, runner):
        runner.invoke(app, ["config", "init", "--api-key", "k1"])
        result = runner.invoke(app, ["config", "init", "--api-key", "k2"])

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_list_profiles_json(self, runner):
        runner.invoke(app, ["config", "init", "--name", "work", "--api-key", "secret-key"])

        result = runner.invoke(app, ["-o", "json", "config", "list-profiles"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["default_profile"] == "work"
        assert data["profiles"][0]["name"] == "work"
        assert "secret-key" not in result.output

    def test_set_default_and_delete(self, runner):
        runner.invoke(app, ["config", "init", "--name", "work", "--api-key", "k1"])
        runner.invoke(app, ["config", "init", "--name", "home", "--api-key", "k2"])

        result = runner.invoke(app, ["config", "set-default", "home"])
        assert result.exit_code == 0

        result = runner.invoke(app, ["config", "delete", "home", "--force"])
        assert result.exit_code == 0
        assert "No default profile now" in result.output

    def test_show_masks_environment_key(self, runner, env_key):
        result = runner.invoke(app, ["-o", "json", "config", "show"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["environment_variables"]["BYTEBARD_API_KEY"] == "****"
        assert data["active_profile"] is None
