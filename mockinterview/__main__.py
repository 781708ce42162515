#!/usr/bin/env python3
"""
Main entry point for the mock interview console.
Allows running the package with: python -m mockinterview
"""
import sys
import logging
from typing import Any, Callable, Dict, List, Optional

from .config import (
    get_config, DEFAULT_JOB_ROLE, DEFAULT_EXPERIENCE_LEVEL, DEFAULT_INTERVIEW_TYPE
)
from .interview import (
    TurnSequencer, SessionConfig, FeedbackReport, OrchestratorState,
    TranscriptionError, TTSService, SpeechToTextService,
    InterviewEventBus, EventLogger, InterviewMetrics, InterviewSession
)
from .infrastructure.llm import VertexRestClient
from .infrastructure.data import SessionStore
from .utils import setup_logging

logger = logging.getLogger("cli")

USAGE = """Usage: python -m mockinterview [options]

  --role=ROLE          Job role to interview for (default: {role})
  --experience=LEVEL   entry-level | mid-level | senior | lead
  --type=TYPE          behavioral | technical | hr-screening | case-study
  --voice, --tts       Speak the interviewer's lines aloud
  --text, --no-tts     Text only
  --history            List saved interviews and exit

During the interview type your answer, '/audio <file.wav>' to answer with a
recording, or '/finish' to end early and get feedback.
""".format(role=DEFAULT_JOB_ROLE)


def parse_args(argv: List[str]) -> Dict[str, Any]:
    """
    Parse command-line flags.

    Raises:
        ValueError: On an unknown flag or a flag missing its value
    """
    options: Dict[str, Any] = {
        "role": DEFAULT_JOB_ROLE,
        "experience": DEFAULT_EXPERIENCE_LEVEL,
        "type": DEFAULT_INTERVIEW_TYPE,
        "use_voice": None,
        "history": False,
        "help": False,
    }

    for arg in argv:
        if arg.startswith("--role="):
            options["role"] = arg.split("=", 1)[1]
        elif arg.startswith("--experience="):
            options["experience"] = arg.split("=", 1)[1]
        elif arg.startswith("--type="):
            options["type"] = arg.split("=", 1)[1]
        elif arg in ("--voice", "--tts"):
            options["use_voice"] = True
        elif arg in ("--text", "--no-tts"):
            options["use_voice"] = False
        elif arg == "--history":
            options["history"] = True
        elif arg in ("-h", "--help"):
            options["help"] = True
        else:
            raise ValueError(f"Unknown argument: {arg}")

    return options


def build_session_config(options: Dict[str, Any], enable_tts_default: bool) -> SessionConfig:
    """Raises ValueError for a blank role or an unknown level or type."""
    use_voice = options["use_voice"]
    if use_voice is None:
        use_voice = enable_tts_default
    return SessionConfig(
        job_role=options["role"],
        experience_level=options["experience"],
        interview_type=options["type"],
        use_voice=use_voice,
    )


def print_interviewer(session: InterviewSession) -> None:
    print(f"\n🤖 Interviewer: {session.last_interviewer_line or ''}")
    if session.is_ending:
        print("🏁 The interview is ending, preparing your feedback...")


def print_feedback(report: FeedbackReport) -> None:
    print("\n" + "=" * 60)
    print("📋 INTERVIEW FEEDBACK")
    print("=" * 60)
    print(f"⭐ Overall:       {report.overall_score}/10")
    print(f"💬 Communication: {report.communication_score}/10")
    print(f"🛠  Technical:     {report.technical_score}/10")

    for title, items in (
        ("💪 Strengths", report.strengths),
        ("🎯 Areas for improvement", report.areas_for_improvement),
        ("📚 Recommendations", report.recommendations),
    ):
        print(f"\n{title}:")
        for item in items:
            print(f"  - {item}")

    print(f"\n📝 {report.detailed_feedback}")
    if report.degraded:
        print("\n⚠️  Detailed scoring was unavailable, these are generic defaults.")


def print_history(store: SessionStore) -> None:
    records = store.list_sessions()
    if not records:
        print("📭 No saved interviews yet.")
        return

    print(f"📚 {len(records)} saved interview(s):")
    for record in records:
        print(f"  {record.completed_at[:19]}  {record.job_role} ({record.interview_type}) "
              f"- {record.overall_score}/10, {record.question_count} question(s)  [{record.session_id}]")


def _read_audio(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def run_interview(sequencer: TurnSequencer,
                  session_config: SessionConfig,
                  read_line: Callable[[str], str] = input) -> Optional[FeedbackReport]:
    """
    Drive one interview from the console.

    Returns:
        The feedback report, or None if the interview could not start
    """
    print(f"\n🎤 Starting a {session_config.interview_type.value} interview for "
          f"{session_config.job_role} ({session_config.experience_level.value})...")
    try:
        session = sequencer.start(session_config)
    except Exception as e:
        logger.error(f"Interview failed to start: {e}")
        print(f"❌ Could not start the interview: {e}")
        return None

    print_interviewer(session)

    while session.state == OrchestratorState.AWAITING_TURN:
        try:
            line = read_line("\n🧑 You: ").strip()
        except EOFError:
            line = "/finish"

        if not line:
            continue

        try:
            if line == "/finish":
                print("⏹  Ending the interview early...")
                sequencer.generate_feedback()
                break
            if line.startswith("/audio"):
                path = line[len("/audio"):].strip()
                if not path:
                    print("❌ Usage: /audio <file.wav>")
                    continue
                print("🔍 Processing speech...")
                session = sequencer.submit_audio(_read_audio(path))
                print(f"💬 \"{session.transcript[-2].text}\"")
            else:
                session = sequencer.submit_answer(line)
        except TranscriptionError as e:
            print(f"❌ {e}. Please try again.")
            continue
        except OSError as e:
            print(f"❌ Could not read recording: {e}")
            continue
        except Exception as e:
            logger.error(f"Turn failed: {e}")
            print("❌ Something went wrong processing that answer. Please try again.")
            continue

        print_interviewer(session)

    final = sequencer.session
    if final is None or final.feedback is None:
        return None

    print_feedback(final.feedback)
    return final.feedback


def main(argv: Optional[List[str]] = None):
    """Command-line interface for the mock interview."""
    if argv is None:
        argv = sys.argv[1:]

    try:
        options = parse_args(argv)
    except ValueError as e:
        print(f"❌ {e}")
        print(USAGE)
        sys.exit(2)

    if options["help"]:
        print(USAGE)
        return

    # Load configuration from environment
    try:
        config = get_config()
    except ValueError as e:
        print(f"❌ Configuration Error: {e}")
        sys.exit(1)

    setup_logging(config.log_file, config.log_level)
    store = SessionStore(config.sessions_dir)

    if options["history"]:
        print_history(store)
        return

    try:
        session_config = build_session_config(options, config.enable_tts)
    except ValueError as e:
        print(f"❌ {e}")
        sys.exit(2)

    if session_config.use_voice:
        print("🔊 Voice Mode: the interviewer will speak its questions aloud")
        print("   (Use --text to disable speech)")
    else:
        print("📝 Text Mode: questions will be displayed as text only")

    event_bus = InterviewEventBus()
    metrics = InterviewMetrics()
    event_bus.subscribe_all(EventLogger().handle_event)
    event_bus.subscribe_all(metrics.handle_event)

    llm_client = VertexRestClient(
        project=config.google_cloud_project,
        location=config.vertex_location,
        model=config.model_name,
        credentials_json=config.google_application_credentials,
        timeout=config.llm_timeout,
    )
    sequencer = TurnSequencer(
        llm_client,
        tts_service=TTSService(use_tts=session_config.use_voice,
                               voice=config.tts_voice,
                               language_code=config.language_code),
        stt_service=SpeechToTextService(sample_rate=config.stt_sample_rate,
                                        language_code=config.language_code,
                                        encoding=config.stt_encoding),
        session_store=store,
        event_bus=event_bus,
        question_count=config.question_count,
        history_window=config.history_window,
    )

    run_interview(sequencer, session_config)

    logger.info(f"Session metrics: {metrics.get_metrics()}")
    print(f"\n📁 Log file: {config.log_file}")


if __name__ == "__main__":
    main()
