import json


class TestImagesCli:

    def test_create_show_delete(self, migrated_app):
        runner = migrated_app.test_cli_runner()

        result = runner.invoke(args=["images", "create", "a.png", "/imgs/a.png"])
        assert result.exit_code == 0, result.output
        created = json.loads(result.output)
        assert created["filename"] == "a.png"
        assert created["deleted_at"] is None

        result = runner.invoke(args=["images", "show", str(created["id"])])
        assert result.exit_code == 0
        assert json.loads(result.output)["filepath"] == "/imgs/a.png"

        result = runner.invoke(args=["images", "delete", str(created["id"])])
        assert result.exit_code == 0
        assert f"image {created['id']} deleted" in result.output

        result = runner.invoke(args=["images", "show", str(created["id"])])
        assert result.exit_code == 1
        assert "not found" in result.output

        result = runner.invoke(args=["images", "show", str(created["id"]), "--include-deleted"])
        assert result.exit_code == 0
        assert json.loads(result.output)["deleted_at"] is not None

    def test_update(self, migrated_app):
        runner = migrated_app.test_cli_runner()
        created = json.loads(runner.invoke(args=["images", "create", "b.png", "/imgs/b.png"]).output)

        result = runner.invoke(args=["images", "update", str(created["id"]), "--filename", "c.png"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["filename"] == "c.png"
        assert data["filepath"] == "/imgs/b.png"

    def test_unknown_id(self, migrated_app):
        result = migrated_app.test_cli_runner().invoke(args=["images", "delete", "77"])

        assert result.exit_code == 1
        assert "image 77 not found" in result.output

    def test_migrate_schema_command(self, app):
        runner = app.test_cli_runner()

        assert "schema up to date" in runner.invoke(args=["migrate-schema"]).output
        assert runner.invoke(args=["migrate-schema"]).exit_code == 0
