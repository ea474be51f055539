import pytest

from placement_portal.services.insights_service import InsightsService, infer_level, parse_package, two_decimals


@pytest.mark.parametrize("raw,expected", [
    ("12 LPA", 12.0),
    ("₹12 LPA", 12.0),
    ("$15 USD", 15.0),
    ("₹ 8.5 LPA", 8.5),
    ("$150k", 150.0),
    ("INR 10", 10.0),
    ("lpa 7", 7.0),
    ("12.5.3 LPA", 12.5),
    ("N/A", None),
    ("", None),
    (None, None),
])
def test_parse_package(raw, expected):
    assert parse_package(raw) == expected


@pytest.mark.parametrize("round_name,level", [
    ("Technical Screening Round", "Easy"),
    ("HR Round", "Medium"),
    ("System Design", "Hard"),
    ("Final Technical Interview", "Hard"),
    ("Technical Interview 1", "Medium"),
    ("", "Medium"),
    (None, "Medium"),
])
def test_infer_level(round_name, level):
    assert infer_level(round_name) == level


def _round(name, *questions, number=1):
    return {"roundNumber": number, "roundName": name, "questions": list(questions)}


def test_insights_overview(make_experience):
    make_experience(company="Google", role="SDE", year=2024, package="12 LPA",
                    rounds=[_round("Technical", "Reverse a linked list", "Two sum")])
    make_experience(company="Google", role="SRE", year=2023, package="15 LPA",
                    rounds=[_round("Technical", "two sum")])
    make_experience(company="Amazon", role="SDE", year=2024, package="N/A", rounds=[_round("HR")])
    make_experience(company="Flipkart", role="SDE", year=2024, package=None, moderationStatus="rejected",
                    rounds=[_round("HR", "Why us?")])

    insights = InsightsService().get_insights()
    overview = insights["overview"]

    assert overview["totalExperiences"] == 4
    assert overview["uniqueCompanies"] == 3
    assert overview["uniqueRoles"] == 2
    assert overview["avgPackage"] == "13.50"
    assert overview["maxPackage"] == 15.0
    assert overview["minPackage"] == 12.0

    assert insights["frequentQuestions"][0] == {"question": "two sum", "count": 2}
    # equal counts keep first-encountered order
    assert [q["question"] for q in insights["frequentQuestions"][1:]] == ["reverse a linked list", "why us?"]

    assert insights["companyDistribution"] == {"Google": 2, "Amazon": 1, "Flipkart": 1}
    assert insights["yearDistribution"] == {"2024": 3, "2023": 1}
    assert [p["value"] for p in insights["packageTrends"]] == [15.0, 12.0]


def test_insights_on_empty_collection():
    insights = InsightsService().get_insights()
    assert insights["overview"]["avgPackage"] == "0.00"
    assert insights["overview"]["maxPackage"] == 0
    assert insights["frequentQuestions"] == []
    assert insights["packageTrends"] == []


def test_frequent_questions_capped_at_ten(make_experience):
    questions = [f"Question {i}" for i in range(15)]
    make_experience(rounds=[_round("Technical", *questions)])

    assert len(InsightsService().get_insights()["frequentQuestions"]) == 10


def test_search_questions_by_company(make_experience):
    make_experience(company="Google", role="SDE",
                    rounds=[_round("Online Screening", "Two sum"), _round("System Design", "Design a URL shortener", number=2)])
    make_experience(company="Google India", role="Data Scientist", rounds=[_round("HR", "Why Google?")])
    make_experience(company="Amazon", role="SDE", rounds=[_round("Technical", "LRU cache")])

    result = InsightsService().search_questions(company="google")

    assert result["total"] == 3
    assert result["availableRoles"] == ["Data Scientist", "SDE"]
    first = result["questions"][0]
    assert first["question"] == "Two sum"
    assert first["level"] == "Easy"
    assert first["company"] == "Google"
    assert result["questions"][1]["level"] == "Hard"


def test_search_questions_by_role_only(make_experience):
    make_experience(company="Google", role="SDE", rounds=[_round("Technical", "Two sum")])
    make_experience(company="Amazon", role="Data Scientist", rounds=[_round("Technical", "Bias vs variance")])

    result = InsightsService().search_questions(role="data")

    assert [q["question"] for q in result["questions"]] == ["Bias vs variance"]
    assert result["availableRoles"] == []


@pytest.mark.parametrize("value,expected", [
    (12.125, "12.13"),
    (13.5, "13.50"),
    (1.005, "1.00"),
    (0, "0.00"),
])
def test_two_decimals_rounds_ties_up(value, expected):
    assert two_decimals(value) == expected


def test_average_package_tie_rounds_up(make_experience):
    make_experience(package="12.25 LPA")
    make_experience(package="12 LPA")

    assert InsightsService().get_insights()["overview"]["avgPackage"] == "12.13"
