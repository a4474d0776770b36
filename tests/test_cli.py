"""Tests for the command-line entry point.

main() is called with init_backend=False since the session fixture has
already initialized Taichi.
"""

import pytest

from rtweekend.cli import config_from_args, main, parse_args


class TestParseArgs:
    def test_defaults(self):
        args = parse_args([])
        assert args.scene == "two_spheres"
        assert args.width == 400
        assert args.height is None
        assert args.samples == 100
        assert args.max_depth == 50
        assert args.output == "-"
        assert not args.binary

    def test_config_uses_scene_aspect(self):
        assert config_from_args(parse_args([])).height == 225
        config = config_from_args(parse_args(["--scene", "random_spheres", "--width", "600"]))
        assert config.height == 400

    def test_explicit_height_wins(self):
        config = config_from_args(parse_args(["--width", "10", "--height", "10", "--aspect", "2"]))
        assert config.height == 10

    @pytest.mark.parametrize("aspect", ["0", "-1.5"])
    def test_non_positive_aspect_rejected(self, aspect):
        with pytest.raises(ValueError, match="aspect"):
            config_from_args(parse_args(["--aspect", aspect]))

    def test_invalid_choice_exits(self):
        with pytest.raises(SystemExit):
            parse_args(["--scene", "teapot"])


class TestMain:
    def test_gradient_to_file(self, tmp_path, capsys):
        path = tmp_path / "gradient.ppm"
        status = main(
            ["--scene", "gradient", "--width", "8", "--height", "4", "--output", str(path)],
            init_backend=False,
        )

        assert status == 0
        lines = path.read_text().splitlines()
        assert lines[:3] == ["P3", "8 4", "255"]
        assert len(lines) == 3 + 32
        err = capsys.readouterr().err
        assert "Scanlines remaining: 3" in err
        assert "Scanlines remaining: 0" in err
        assert "Done." in err

    def test_render_to_file(self, tmp_path):
        path = tmp_path / "two_spheres.ppm"
        argv = [
            "--width", "8", "--height", "4", "--samples", "2", "--max-depth", "5",
            "--seed", "3", "--output", str(path), "--quiet",
        ]
        assert main(argv, init_backend=False) == 0
        first = path.read_bytes()
        assert first.startswith(b"P3\n8 4\n255\n")

        assert main(argv, init_backend=False) == 0
        assert path.read_bytes() == first

    def test_png_output(self, tmp_path):
        from PIL import Image as PILImage

        path = tmp_path / "showcase.png"
        argv = [
            "--scene", "showcase", "--width", "8", "--height", "4", "--samples", "1",
            "--seed", "1", "--output", str(path), "--quiet",
        ]
        assert main(argv, init_backend=False) == 0
        with PILImage.open(path) as img:
            assert img.size == (8, 4)

    def test_stdout(self, capsys):
        assert main(["--scene", "gradient", "--width", "2", "--height", "2", "--quiet"],
                    init_backend=False) == 0
        out = capsys.readouterr().out
        assert out.startswith("P3\n2 2\n255\n")

    def test_invalid_config_returns_2(self, capsys):
        assert main(["--width", "0"], init_backend=False) == 2
        assert "width" in capsys.readouterr().err

    def test_unwritable_output_returns_1(self, tmp_path):
        path = tmp_path / "missing" / "out.ppm"
        argv = ["--scene", "gradient", "--width", "2", "--height", "2", "--output", str(path)]
        assert main(argv, init_backend=False) == 1
