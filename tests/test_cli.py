"""Tests for the tilegrid command-line entry point."""

from tilegrid.cli import main

GRID_ARGS = ["--bounds", "0", "0", "100", "100", "--tile-size", "10"]


class TestCli:
    """Test suite for tilegrid.cli.main."""

    def test_point_lookup(self, capsys):
        """Test printing the tile under a point."""
        assert main(GRID_ARGS + ["--point", "95", "95"]) == 0
        assert capsys.readouterr().out.strip() == "99"

    def test_point_outside(self, capsys):
        """Test the sentinel for a point off the grid."""
        assert main(GRID_ARGS + ["--point", "150", "5"]) == 0
        assert capsys.readouterr().out.strip() == "-1"

    def test_bbox_query(self, capsys):
        """Test printing the tiles of a bounding box."""
        assert main(GRID_ARGS + ["--bbox", "15", "15", "25", "25"]) == 0
        lines = capsys.readouterr().out.split()
        assert sorted(int(line) for line in lines) == [11, 12, 21, 22]

    def test_bbox_max_tiles(self, capsys):
        """Test the tile cap option."""
        assert main(GRID_ARGS + ["--bbox", "0", "0", "100", "100", "--max-tiles", "3"]) == 0
        assert len(capsys.readouterr().out.split()) == 3

    def test_summary(self, capsys):
        """Test the grid summary printed without a query."""
        assert main(GRID_ARGS + ["--no-wrap"]) == 0
        out = capsys.readouterr().out
        assert "Rows:       10" in out
        assert "Tile count: 100" in out
        assert "Wrap:       False" in out

    def test_config_file_with_override(self, tmp_path, capsys):
        """Test that command-line flags override config values."""
        path = tmp_path / "grid.yml"
        path.write_text(
            "grid:\n  bounds: [0, 0, 100, 100]\n  tile_size: 50\n",
            encoding="utf-8",
        )
        assert main(["--config", str(path), "--point", "95", "95"]) == 0
        assert capsys.readouterr().out.strip() == "3"

        assert main(["--config", str(path), "--tile-size", "10", "--point", "95", "95"]) == 0
        assert capsys.readouterr().out.strip() == "99"

    def test_invalid_grid(self, capsys):
        """Test the exit status for a bad tile size."""
        assert main(["--bounds", "0", "0", "100", "100", "--tile-size", "0"]) == 2
        assert "Error" in capsys.readouterr().err

    def test_missing_grid(self, capsys):
        """Test the exit status when no grid is given."""
        assert main(["--point", "1", "1"]) == 2
        assert "bounds" in capsys.readouterr().err
