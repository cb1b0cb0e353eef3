"""
Tests for the command line entry point.
"""
import os

import pytest

import main
from config import POPULATION, MAX_GENERATIONS, SPECIES


class TestParseArgs:

    def test_defaults(self):
        args = main.parse_args([])
        assert args.pop == POPULATION
        assert args.gens == MAX_GENERATIONS
        assert args.species == SPECIES
        assert args.seed is None

    def test_overrides(self):
        args = main.parse_args(["--species", "forward_only", "--pop", "50",
                                "--mutation", "0.4", "--workers", "2"])
        assert args.species == "forward_only"
        assert args.pop == 50
        assert args.mutation == 0.4
        assert args.workers == 2

    def test_unknown_species(self):
        with pytest.raises(SystemExit):
            main.parse_args(["--species", "boa"])

    def test_unknown_activation(self):
        with pytest.raises(SystemExit):
            main.parse_args(["--activation", "tanh"])


class TestMain:

    def test_short_run(self, tmp_path, capsys):
        pit = main.main(["--species", "forward_only", "--width", "8", "--height", "8",
                         "--pop", "6", "--gens", "2", "--seed", "3",
                         "--outdir", str(tmp_path), "--no_animation"])
        assert pit.generation == 2

        outdir = tmp_path / "forward_only"
        lines = (outdir / "evolution_log.csv").read_text().splitlines()
        assert lines[0] == "Generation,Fitness,Length,Moves"
        assert len(lines) == 3
        assert (outdir / "replays" / "gen_000001.png").is_file()
        assert (outdir / "charts" / "evolution_final.png").is_file()
        assert "Best snake in generation #2" in capsys.readouterr().out

    def test_no_mutation(self, tmp_path):
        pit = main.main(["--species", "forward_only", "--width", "8", "--height", "8",
                         "--pop", "4", "--gens", "1", "--no_mutation",
                         "--outdir", str(tmp_path), "--no_animation"])
        assert pit.mutation_probability == 0.0
        assert os.listdir(tmp_path / "forward_only" / "replays")
