"""CLI entry point for the storyboard builder."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer

from . import __version__
from .assembler import ProjectAssembler, export_payload
from .config import Config, Credentials, load_config
from .errors import ConfigurationError, StoryboardError
from .keywords import split_keywords
from .models import (
    AspectRatio,
    MediaResult,
    MediaType,
    PollyEngine,
    Project,
    RenderOptions,
    Scene,
    ScenePlanRequest,
    SceneUpdate,
    SubtitleTransition,
    TransitionType,
    TTSProvider,
    UserConfig,
)
from .storage import create_store

app = typer.Typer(
    name="storyboard",
    help="AI-assisted video storyboard builder",
    no_args_is_help=True
)

OWNER_OPTION = typer.Option(
    "local",
    "--owner",
    "-u",
    envvar="STORYBOARD_OWNER",
    help="Owner id projects and settings are stored under"
)


class KeywordKind(str, Enum):
    """Which keyword field a command works on."""
    VISUAL = "visual"
    AUDIO = "audio"


class MediaSlot(str, Enum):
    """Scene fields a search result can be attached to."""
    VISUAL = "visual"
    TRANSITION = "transition"
    NARRATION = "narration"
    AUDIO = "audio"
    BACKGROUND = "background"


SLOT_FIELDS = {
    MediaSlot.VISUAL: "selected_visual",
    MediaSlot.TRANSITION: "transition_visual",
    MediaSlot.NARRATION: "narration_video",
    MediaSlot.AUDIO: "selected_audio",
    MediaSlot.BACKGROUND: "bg_audio",
}


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"storyboard version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
) -> None:
    """Storyboard builder - plan narrated videos and pick stock media with AI."""
    pass


def _fail(error: Exception) -> None:
    """Report a pipeline error and exit."""
    if isinstance(error, ConfigurationError):
        typer.echo(f"❌ Configuration error: {error}")
        typer.echo("   Run 'storyboard configure --help' to save your API keys")
    else:
        typer.echo(f"❌ {error}")
    raise typer.Exit(1)


def _open(owner: str) -> tuple:
    """Return config, store and the owner's credentials."""
    try:
        config = load_config()
        store = create_store(config)
        profile = store.get_user_config(owner)
    except StoryboardError as e:
        _fail(e)
    return config, store, profile, Credentials.resolve(config, profile)


def _pick_scene(project: Project, number: int) -> Scene:
    if not 1 <= number <= len(project.scenes):
        typer.echo(f"❌ Scene {number} does not exist (project has {len(project.scenes)} scenes)")
        raise typer.Exit(1)
    return project.scenes[number - 1]


def _echo_results(results: List[MediaResult]) -> None:
    for i, result in enumerate(results, 1):
        duration = f" ({result.duration_seconds:.1f}s)" if result.duration_seconds else ""
        typer.echo(f"   [{i}] {result.type.value} {result.id}: {result.title[:60]}{duration}")
        typer.echo(f"       → {result.url}")


def _echo_project(project: Project) -> None:
    typer.echo(f"📁 Project: {project.name}")
    typer.echo(f"   Id: {project.id}")
    typer.echo(f"   Aspect ratio: {project.aspect_ratio.value}")
    typer.echo(
        f"   Target duration: {project.target_duration_seconds:g}s "
        f"(planned: {project.total_duration:.1f}s)"
    )
    typer.echo(f"   Scenes: {len(project.scenes)}")
    if project.global_bg_audio:
        typer.echo(f"   Background audio: {project.global_bg_audio.title}")

    typer.echo("\n📽️  Scenes:")
    for i, scene in enumerate(project.scenes, 1):
        status_icon = "✅" if scene.selected_visual else "⏳"
        typer.echo(
            f"   {status_icon} {i}. {scene.title}: {scene.duration_seconds:g}s "
            f"[{scene.transition_type.value}/{scene.subtitle_transition.value}]"
        )
        narration_preview = scene.narration[:70] + "..." if len(scene.narration) > 70 else scene.narration
        typer.echo(f"      → {narration_preview}")
        typer.echo(f"      visual: {scene.visual_keywords}")
        typer.echo(f"      audio: {scene.audio_keywords}")


@app.command()
def plan(
    prompt: str = typer.Argument(
        ...,
        help="Description of the video to plan"
    ),
    duration: float = typer.Option(
        60,
        "--duration",
        "-d",
        help="Target duration in seconds"
    ),
    scenes: int = typer.Option(
        6,
        "--scenes",
        "-s",
        help="Desired number of scenes (the model may adjust for pacing)"
    ),
    aspect_ratio: AspectRatio = typer.Option(
        AspectRatio.HORIZONTAL,
        "--aspect-ratio",
        "-a",
        help="Output orientation"
    ),
    owner: str = OWNER_OPTION,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging"
    ),
) -> None:
    """Generate a scene plan from a prompt and save it as a new project."""
    from .workflow import create_project

    setup_logging(verbose)
    typer.echo(f"🎬 Planning: {prompt}")
    typer.echo(f"   Target duration: {duration:g}s, ~{scenes} scenes, {aspect_ratio.value}")

    config, store, _, credentials = _open(owner)
    request = ScenePlanRequest(
        prompt=prompt,
        aspect_ratio=aspect_ratio,
        target_duration_seconds=duration,
        desired_scene_count=scenes,
    )

    try:
        typer.echo(f"   Using model: {credentials.model}")
        typer.echo("   Generating scenes...")
        project = create_project(request, owner, credentials, store, limits=config.limits)
    except StoryboardError as e:
        _fail(e)

    typer.echo(f"\n✅ Project saved: {project.id}\n")
    _echo_project(project)


@app.command()
def show(
    project_id: str = typer.Argument(..., help="Project id"),
    owner: str = OWNER_OPTION,
) -> None:
    """Show a project and its scenes."""
    _, store, _, _ = _open(owner)
    try:
        project = ProjectAssembler(store).load(owner, project_id)
    except StoryboardError as e:
        _fail(e)
    _echo_project(project)


@app.command("list")
def list_projects(owner: str = OWNER_OPTION) -> None:
    """List projects, most recently modified first."""
    _, store, _, _ = _open(owner)
    try:
        projects = store.list_projects(owner)
    except StoryboardError as e:
        _fail(e)

    if not projects:
        typer.echo("No projects yet. Run 'storyboard plan' to create one.")
        return
    for project in projects:
        typer.echo(
            f"   {project.id}  {project.last_modified:%Y-%m-%d %H:%M}  "
            f"{len(project.scenes)} scenes  {project.name}"
        )


@app.command()
def search(
    query: str = typer.Argument(..., help="Keywords to search for"),
    kind: MediaType = typer.Option(
        MediaType.IMAGE,
        "--kind",
        "-k",
        help="image or video (Pixabay), audio (Freesound)"
    ),
    owner: str = OWNER_OPTION,
) -> None:
    """Search stock media."""
    from .services import search_media

    _, _, _, credentials = _open(owner)
    try:
        results = search_media(query, kind, credentials)
    except StoryboardError as e:
        _fail(e)

    if not results:
        typer.echo("No matches. Try adjusting the keywords.")
        return
    typer.echo(f"🔎 {len(results)} {kind.value} results:")
    _echo_results(results)


@app.command()
def select(
    project_id: str = typer.Argument(..., help="Project id"),
    scene: int = typer.Option(..., "--scene", "-n", help="Scene number (1-based)"),
    kind: MediaType = typer.Option(MediaType.IMAGE, "--kind", "-k", help="Media kind to search"),
    slot: MediaSlot = typer.Option(MediaSlot.VISUAL, "--slot", help="Scene field to attach the result to"),
    query: Optional[str] = typer.Option(
        None,
        "--query",
        "-q",
        help="Search keywords (defaults to the scene's keywords)"
    ),
    index: int = typer.Option(1, "--index", "-i", help="Which search result to attach (1-based)"),
    use_tags: bool = typer.Option(
        False,
        "--use-tags",
        help="Also replace the scene's keywords with the result's tags"
    ),
    owner: str = OWNER_OPTION,
) -> None:
    """Search stock media and attach one result to a scene."""
    from .services import search_media

    _, store, _, credentials = _open(owner)
    assembler = ProjectAssembler(store)
    try:
        project = assembler.load(owner, project_id)
        target = _pick_scene(project, scene)
        if query is None:
            query = target.audio_keywords if kind == MediaType.AUDIO else target.visual_keywords
            query = query or target.title
        results = search_media(query, kind, credentials)
        if not 1 <= index <= len(results):
            typer.echo(f"❌ Result {index} not available ({len(results)} results for '{query}')")
            raise typer.Exit(1)
        chosen = results[index - 1]
        changes = {SLOT_FIELDS[slot]: chosen}
        if use_tags:
            keyword_field = "audio_keywords" if kind == MediaType.AUDIO else "visual_keywords"
            changes[keyword_field] = chosen.as_keywords()
        assembler.update_scene(owner, project_id, target.id, SceneUpdate(**changes))
    except StoryboardError as e:
        _fail(e)

    typer.echo(f"✅ Scene {scene} {slot.value}: {chosen.title}")
    if use_tags:
        typer.echo(f"   Keywords: {changes[keyword_field]}")


@app.command()
def suggest(
    project_id: str = typer.Argument(..., help="Project id"),
    scene: int = typer.Option(..., "--scene", "-n", help="Scene number (1-based)"),
    kind: KeywordKind = typer.Option(KeywordKind.VISUAL, "--kind", "-k", help="Keyword field to refine"),
    add: Optional[str] = typer.Option(
        None,
        "--add",
        help="Comma-separated keywords you are considering"
    ),
    apply: bool = typer.Option(False, "--apply", help="Replace the scene's keywords with the suggestions"),
    owner: str = OWNER_OPTION,
) -> None:
    """Ask the model for better search keywords for a scene."""
    from .agents import suggest_keywords

    _, store, _, credentials = _open(owner)
    assembler = ProjectAssembler(store)
    try:
        project = assembler.load(owner, project_id)
    except StoryboardError as e:
        _fail(e)
    target = _pick_scene(project, scene)

    field = "visual_keywords" if kind == KeywordKind.VISUAL else "audio_keywords"
    existing = split_keywords(getattr(target, field))
    suggestions = suggest_keywords(
        f"{target.title}. {target.narration}",
        existing,
        split_keywords(add),
        credentials=credentials,
    )

    if not suggestions:
        typer.echo("No better suggestion available.")
        return
    typer.echo(f"💡 Suggested {kind.value} keywords: {', '.join(suggestions)}")

    if apply:
        try:
            assembler.update_scene(owner, project_id, target.id, SceneUpdate(**{field: ", ".join(suggestions)}))
        except StoryboardError as e:
            _fail(e)
        typer.echo(f"✅ Scene {scene} {kind.value} keywords updated")


@app.command()
def edit(
    project_id: str = typer.Argument(..., help="Project id"),
    scene: int = typer.Option(..., "--scene", "-n", help="Scene number (1-based)"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    narration: Optional[str] = typer.Option(None, "--narration", help="New narration script"),
    duration: Optional[float] = typer.Option(None, "--duration", "-d", help="New duration in seconds"),
    visual_keywords: Optional[str] = typer.Option(None, "--visual-keywords", help="New visual keywords"),
    audio_keywords: Optional[str] = typer.Option(None, "--audio-keywords", help="New audio keywords"),
    transition: Optional[TransitionType] = typer.Option(None, "--transition", help="Scene transition"),
    subtitle_transition: Optional[SubtitleTransition] = typer.Option(
        None,
        "--subtitle-transition",
        help="Subtitle transition"
    ),
    owner: str = OWNER_OPTION,
) -> None:
    """Change fields of one scene."""
    values = {
        "title": title,
        "narration": narration,
        "duration_seconds": duration,
        "visual_keywords": visual_keywords,
        "audio_keywords": audio_keywords,
        "transition_type": transition,
        "subtitle_transition": subtitle_transition,
    }
    changes = {key: value for key, value in values.items() if value is not None}
    if not changes:
        typer.echo("Nothing to change.")
        raise typer.Exit(0)

    _, store, _, _ = _open(owner)
    assembler = ProjectAssembler(store)
    try:
        project = assembler.load(owner, project_id)
        target = _pick_scene(project, scene)
        assembler.update_scene(owner, project_id, target.id, SceneUpdate(**changes))
    except StoryboardError as e:
        _fail(e)
    typer.echo(f"✅ Scene {scene} updated: {', '.join(sorted(changes))}")


@app.command()
def export(
    project_id: str = typer.Argument(..., help="Project id"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the payload to this file instead of stdout"
    ),
    tts: Optional[TTSProvider] = typer.Option(None, "--tts", help="Text-to-speech provider"),
    voice: Optional[str] = typer.Option(None, "--voice", help="Amazon Polly voice id"),
    engine: Optional[PollyEngine] = typer.Option(None, "--engine", help="Amazon Polly engine"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes for the rendering backend"),
    owner: str = OWNER_OPTION,
) -> None:
    """Export a project as a JSON payload for the rendering backend."""
    _, store, profile, credentials = _open(owner)
    try:
        project = ProjectAssembler(store).load(owner, project_id)
    except StoryboardError as e:
        _fail(e)

    options = RenderOptions(
        tts_provider=tts or profile.tts_provider,
        voice_id=voice or profile.polly_voice,
        engine=engine or profile.polly_engine,
        model=credentials.model,
        notes=notes,
    )
    document = json.dumps(export_payload(project, options), indent=2)

    if output is None:
        typer.echo(document)
        return
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(document)
    except OSError as e:
        typer.echo(f"❌ Error saving payload: {e}")
        raise typer.Exit(1)
    typer.echo(f"✅ Payload saved: {output}")


@app.command()
def delete(
    project_id: str = typer.Argument(..., help="Project id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    owner: str = OWNER_OPTION,
) -> None:
    """Delete a project."""
    if not yes:
        typer.confirm(f"Delete project {project_id}?", abort=True)
    _, store, _, _ = _open(owner)
    try:
        ProjectAssembler(store).delete(owner, project_id)
    except StoryboardError as e:
        _fail(e)
    typer.echo(f"🗑️  Deleted project {project_id}")


@app.command()
def configure(
    model_key: Optional[str] = typer.Option(None, "--model-key", help="Anthropic API key"),
    text_model: Optional[str] = typer.Option(None, "--text-model", help="Claude model override"),
    pixabay_key: Optional[str] = typer.Option(None, "--pixabay-key", help="Pixabay API key"),
    freesound_key: Optional[str] = typer.Option(None, "--freesound-key", help="Freesound API token"),
    tts: Optional[TTSProvider] = typer.Option(None, "--tts", help="Text-to-speech provider"),
    polly_voice: Optional[str] = typer.Option(None, "--polly-voice", help="Amazon Polly voice id"),
    polly_engine: Optional[PollyEngine] = typer.Option(None, "--polly-engine", help="Amazon Polly engine"),
    aws_access_key_id: Optional[str] = typer.Option(None, "--aws-access-key-id"),
    aws_secret_access_key: Optional[str] = typer.Option(None, "--aws-secret-access-key"),
    aws_region: Optional[str] = typer.Option(None, "--aws-region"),
    output_directory: Optional[str] = typer.Option(None, "--output-directory", help="Renderer output directory"),
    render_backend_url: Optional[str] = typer.Option(None, "--render-backend-url"),
    render_backend_api_key: Optional[str] = typer.Option(None, "--render-backend-api-key"),
    owner: str = OWNER_OPTION,
) -> None:
    """Save API keys and rendering preferences, or show them when called without options."""
    values = {
        "model_api_key": model_key,
        "text_model": text_model,
        "pixabay_key": pixabay_key,
        "freesound_key": freesound_key,
        "tts_provider": tts,
        "polly_voice": polly_voice,
        "polly_engine": polly_engine,
        "aws_access_key_id": aws_access_key_id,
        "aws_secret_access_key": aws_secret_access_key,
        "aws_region": aws_region,
        "output_directory": output_directory,
        "render_backend_url": render_backend_url,
        "render_backend_api_key": render_backend_api_key,
    }
    changes = {key: value for key, value in values.items() if value is not None}

    config, store, profile, _ = _open(owner)
    if changes:
        try:
            store.save_user_config(owner, UserConfig(**changes))
            profile = store.get_user_config(owner)
        except StoryboardError as e:
            _fail(e)
        typer.echo(f"✅ Saved: {', '.join(sorted(changes))}")

    _echo_settings(config, profile)


def _echo_settings(config: Config, profile: UserConfig) -> None:
    def status(stored: Optional[str], fallback: str) -> str:
        if stored:
            return "set"
        return "from environment" if fallback else "missing"

    typer.echo("🔑 Keys:")
    typer.echo(f"   Model: {status(profile.model_api_key, config.anthropic_api_key)}")
    typer.echo(f"   Pixabay: {status(profile.pixabay_key, config.pixabay_api_key)}")
    typer.echo(f"   Freesound: {status(profile.freesound_key, config.freesound_api_key)}")
    typer.echo(f"🗣️  TTS: {profile.tts_provider.value}")
    missing = profile.missing_polly_settings()
    if missing:
        typer.echo(f"⚠️  Amazon Polly needs: {', '.join(missing)}")


if __name__ == "__main__":
    app()
