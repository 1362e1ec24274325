import pytest
from taxplan.domain.Plan import Plan
from taxplan.domain.Suggestion import Suggestion
from taxplan.infra.Plan_Repository import PlanNotFound, PlanRepository, UnauthorizedPlanAccess


def _plan(user_id="user-1", plan_type="standard"):
    return Plan(
        name="Tax Plan (Oct 2026)",
        suggestions=[Suggestion("Lifestyle Relief", "Keep receipts.", 325.0),
                     Suggestion("Donation", "Give to approved bodies.", 130.0)],
        plan_type=plan_type,
        user_id=user_id,
    )


@pytest.fixture
def repo(tmp_path):
    return PlanRepository(tmp_path / "tax_plans.json")


def test_create_and_read_back(repo):
    plan = repo.create_plan(_plan())
    loaded = repo.get_plan_by_id(plan.id, "user-1")
    assert loaded.to_dict() == plan.to_dict()
    assert loaded.potential_savings == pytest.approx(455.0)


def test_user_plans_are_isolated(repo):
    mine = repo.create_plan(_plan("user-1"))
    repo.create_plan(_plan("user-2"))
    assert [p.id for p in repo.get_user_plans("user-1")] == [mine.id]


def test_ownership_and_missing_plans(repo):
    plan = repo.create_plan(_plan("user-1"))
    with pytest.raises(UnauthorizedPlanAccess):
        repo.get_plan_by_id(plan.id, "user-2")
    with pytest.raises(PlanNotFound):
        repo.get_plan_by_id("missing", "user-1")
    with pytest.raises(UnauthorizedPlanAccess):
        repo.delete_plan(plan.id, "user-2")


def test_set_suggestion_implemented(repo):
    plan = repo.create_plan(_plan())
    suggestion_id = plan.suggestions[1].id
    updated = repo.set_suggestion_implemented(plan.id, suggestion_id, True, "user-1")
    assert updated.get_suggestion(suggestion_id).is_implemented is True
    assert repo.get_plan_by_id(plan.id, "user-1").get_suggestion(suggestion_id).is_implemented is True
    with pytest.raises(PlanNotFound):
        repo.set_suggestion_implemented(plan.id, "nope", True, "user-1")


def test_update_and_delete(repo):
    plan = repo.create_plan(_plan())
    plan.name = "Renamed"
    repo.update_plan(plan, "user-1")
    assert repo.get_plan_by_id(plan.id, "user-1").name == "Renamed"
    repo.delete_plan(plan.id, "user-1")
    assert repo.get_user_plans("user-1") == []
    with pytest.raises(PlanNotFound):
        repo.delete_plan(plan.id, "user-1")


def test_existing_plan_digests(repo):
    repo.create_plan(_plan(plan_type="future"))
    digests = repo.existing_plan_digests("user-1")
    assert len(digests) == 1
    assert digests[0].plan_type == "future"
    assert digests[0].categories == ["Lifestyle Relief", "Donation"]


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "tax_plans.json"
    path.write_text("{not json", encoding="utf-8")
    assert PlanRepository(path).get_user_plans("user-1") == []
