"""Unit tests for ProfileInterpreter — percentiles, stanines, readings."""
import pytest

from ocean_engine.errors import ScoreValidationError
from ocean_engine.services.interpretation import ProfileInterpreter, interpret_profile


@pytest.fixture
def interpreter():
    return ProfileInterpreter()


@pytest.fixture
def normative_scores():
    """Each dimension sits exactly on its population mean (item mean = 1 + s/25)."""
    return {
        "openness": 73.0,
        "conscientiousness": 70.25,
        "extraversion": 59.75,
        "agreeableness": 73.5,
        "neuroticism": 49.0,
    }


class TestPercentiles:

    def test_population_mean_is_fiftieth(self, interpreter, normative_scores):
        assert set(interpreter.percentiles(normative_scores).values()) == {50}

    def test_clamped_to_1_and_99(self, interpreter, normative_scores):
        normative_scores["neuroticism"] = 100.0
        normative_scores["extraversion"] = 0.0
        percentiles = interpreter.percentiles(normative_scores)
        assert percentiles["neuroticism"] == 99
        assert percentiles["extraversion"] == 1

    def test_invalid_scores_raise(self, interpreter):
        with pytest.raises(ScoreValidationError):
            interpreter.percentiles({"openness": 50})


class TestStanines:

    @pytest.mark.parametrize(
        "percentile,stanine",
        [(1, 1), (3, 1), (4, 2), (10, 2), (11, 3), (39, 4), (50, 5), (60, 6), (77, 7), (95, 8), (96, 9), (99, 9)],
    )
    def test_cut_points(self, percentile, stanine):
        assert ProfileInterpreter.stanines({"openness": percentile}) == {"openness": stanine}


class TestInterpretation:

    def test_average_profile_has_no_readings(self, interpreter, normative_scores):
        result = interpreter.interpret(normative_scores)
        assert result.strengths == []
        assert result.challenges == []
        assert result.recommendations == []

    def test_high_openness_is_strength(self, interpreter, normative_scores):
        normative_scores["openness"] = 100.0
        result = interpreter.interpret(normative_scores)
        assert result.stanines["openness"] >= 7
        assert result.strengths == ["Highly creative and innovative with strong intellectual curiosity"]
        assert len(result.recommendations) == 1

    def test_low_agreeableness_is_challenge(self, interpreter, normative_scores):
        normative_scores["agreeableness"] = 10.0
        result = interpreter.interpret(normative_scores)
        assert result.challenges == ["May come across as overly critical or competitive"]

    def test_neuroticism_is_inverted(self, interpreter, normative_scores):
        low = dict(normative_scores, neuroticism=0.0)
        high = dict(normative_scores, neuroticism=100.0)
        assert interpreter.interpret(low).strengths == ["Exceptional emotional stability and resilience"]
        assert interpreter.interpret(high).challenges == ["May experience stress and emotional volatility"]
        assert interpreter.interpret(high).strengths == []

    def test_module_function(self, normative_scores):
        assert interpret_profile(normative_scores).percentiles["openness"] == 50
