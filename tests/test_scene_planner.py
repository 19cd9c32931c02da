import pytest

from conftest import FakeModelClient, scene_data
from storyboard.agents import ScenePlanner, generate_scene_plan
from storyboard.config import Credentials, PlanLimits
from storyboard.errors import (
    ConfigurationError,
    GenerationFailure,
    ModelUnavailable,
    ValidationError,
)
from storyboard.models import (
    AspectRatio,
    ScenePlanRequest,
    SubtitleTransition,
    TransitionType,
)


def test_rainforest_example(rainforest_request, credentials):
    titles = ["Dawn Mist", "Canopy Light", "Wildlife Awakens", "Golden Rainforest"]
    client = FakeModelClient(response={"scenes": [scene_data(title) for title in titles]})

    plan = generate_scene_plan(rainforest_request, credentials, client=client)

    assert [scene.title for scene in plan] == titles
    assert [scene.duration_seconds for scene in plan] == [15, 15, 15, 15]
    for scene in plan:
        assert scene.narration
        assert scene.transition_type == TransitionType.FADE
        assert scene.subtitle_transition == SubtitleTransition.FADE
    assert len(client.calls) == 1


def test_order_is_preserved(rainforest_request, credentials):
    client = FakeModelClient(response={"scenes": [scene_data("C"), scene_data("A"), scene_data("B")]})

    plan = generate_scene_plan(rainforest_request, credentials, client=client)

    assert [scene.title for scene in plan] == ["C", "A", "B"]


def test_durations_are_not_rescaled(rainforest_request, credentials):
    client = FakeModelClient(response={"scenes": [scene_data("A", 10), scene_data("B", 7.5)]})

    plan = generate_scene_plan(rainforest_request, credentials, client=client)

    assert [scene.duration_seconds for scene in plan] == [10, 7.5]
    assert sum(scene.duration_seconds for scene in plan) != rainforest_request.target_duration_seconds


def test_bare_list_response_is_accepted(rainforest_request, credentials):
    client = FakeModelClient(response=[scene_data("Only")])

    plan = generate_scene_plan(rainforest_request, credentials, client=client)

    assert [scene.title for scene in plan] == ["Only"]


def test_text_response_with_json_block_is_accepted(rainforest_request, credentials):
    text = 'Here you go:\n```json\n{"scenes": [{"title": "A", "narration": "N.", "duration_seconds": 5}]}\n```'
    client = FakeModelClient(response=text)

    plan = generate_scene_plan(rainforest_request, credentials, client=client)

    assert plan[0].title == "A"
    assert plan[0].visual_keywords == ""


def test_transition_values_are_case_insensitive(rainforest_request, credentials):
    client = FakeModelClient(response={"scenes": [
        scene_data("A", transition_type="Zoom", subtitle_transition="NONE"),
    ]})

    plan = generate_scene_plan(rainforest_request, credentials, client=client)

    assert plan[0].transition_type == TransitionType.ZOOM
    assert plan[0].subtitle_transition == SubtitleTransition.NONE


def test_empty_plan_is_a_generation_failure(rainforest_request, credentials):
    client = FakeModelClient(response={"scenes": []})

    with pytest.raises(GenerationFailure):
        generate_scene_plan(rainforest_request, credentials, client=client)


@pytest.mark.parametrize(
    "response",
    [
        None,
        "I cannot help with that.",
        {"plan": []},
        {"scenes": [scene_data("A", transition_type="spin")]},
        {"scenes": [scene_data("A", duration=0)]},
        {"scenes": [scene_data("   ")]},
        {"scenes": [{"title": "No narration", "duration_seconds": 5}]},
        {"scenes": ["not a scene"]},
    ],
)
def test_unusable_output_is_a_generation_failure(rainforest_request, credentials, response):
    client = FakeModelClient(response=response)

    with pytest.raises(GenerationFailure) as excinfo:
        generate_scene_plan(rainforest_request, credentials, client=client)

    assert not isinstance(excinfo.value, ModelUnavailable)


def test_short_prompt_is_rejected_without_calling_the_model(credentials):
    client = FakeModelClient(response={"scenes": [scene_data("A")]})
    request = ScenePlanRequest(prompt="  too short ", target_duration_seconds=60)

    with pytest.raises(ValidationError):
        generate_scene_plan(request, credentials, client=client)

    assert client.calls == []


@pytest.mark.parametrize(
    "duration, scenes",
    [(4, 6), (301, 6), (60, 0), (60, 31)],
)
def test_out_of_bounds_numbers_are_rejected(credentials, duration, scenes):
    client = FakeModelClient(response={"scenes": [scene_data("A")]})
    request = ScenePlanRequest(
        prompt="A long enough prompt about the sea",
        target_duration_seconds=duration,
        desired_scene_count=scenes,
    )

    with pytest.raises(ValidationError):
        generate_scene_plan(request, credentials, client=client)

    assert client.calls == []


def test_limits_are_configurable(credentials):
    client = FakeModelClient(response={"scenes": [scene_data("A")]})
    request = ScenePlanRequest(prompt="Short ok", target_duration_seconds=600, desired_scene_count=40)
    limits = PlanLimits(min_prompt_length=5, max_duration_seconds=900, max_scene_count=50)

    plan = generate_scene_plan(request, credentials, client=client, limits=limits)

    assert len(plan) == 1


def test_missing_model_key_is_a_configuration_error(rainforest_request):
    with pytest.raises(ConfigurationError) as excinfo:
        generate_scene_plan(rainforest_request, Credentials())

    assert "API key" in str(excinfo.value)
    assert excinfo.value.credential == "ANTHROPIC_API_KEY"


def test_short_prompt_wins_over_missing_key():
    request = ScenePlanRequest(prompt="short", target_duration_seconds=60)

    with pytest.raises(ValidationError):
        generate_scene_plan(request, Credentials())


def test_transport_failure_is_distinct_from_bad_content(rainforest_request, credentials):
    client = FakeModelClient(error=ModelUnavailable("Could not reach the Anthropic API"))

    with pytest.raises(ModelUnavailable) as excinfo:
        generate_scene_plan(rainforest_request, credentials, client=client)

    assert not isinstance(excinfo.value, GenerationFailure)


def test_rejected_key_propagates_as_configuration_error(rainforest_request, credentials):
    client = FakeModelClient(error=ConfigurationError("rejected", credential="ANTHROPIC_API_KEY"))

    with pytest.raises(ConfigurationError):
        generate_scene_plan(rainforest_request, credentials, client=client)


def test_prompt_embeds_request_and_field_guidance(credentials):
    client = FakeModelClient(response={"scenes": [scene_data("A")]})
    request = ScenePlanRequest(
        prompt="A day in the life of a lighthouse keeper",
        aspect_ratio=AspectRatio.VERTICAL,
        target_duration_seconds=45,
        desired_scene_count=5,
    )

    ScenePlanner(credentials=credentials, client=client).run(request)

    call = client.calls[0]
    assert "A day in the life of a lighthouse keeper" in call["prompt"]
    assert "45 seconds" in call["prompt"]
    assert "vertical" in call["prompt"]
    assert "around 5" in call["prompt"]
    assert "3-4 words" in call["prompt"]
    assert call["tool_name"] == "record_scene_plan"
    assert "scenes" in call["schema"]["properties"]
    assert "audio keywords" in call["system"].lower()
