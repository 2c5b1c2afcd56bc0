"""
Interview Coach terminal client.

Usage:
    interview-coach practice [--duration SECONDS]
    interview-coach resume path/to/resume.pdf
    interview-coach history
"""

import argparse
import asyncio
import sys
from typing import Optional

from interview_coach.client.api import CoachAPIClient
from interview_coach.client.speech import SpeechCapture, TypedRecognizer
from interview_coach.client.timer import CountdownTimer
from interview_coach.client.views import PracticeView, ResumeUploaderView, SessionHistoryView
from interview_coach.config import Settings
from interview_coach.core.constants import DEFAULT_ANSWER_SECONDS
from interview_coach.utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__, component="practice_client")

MENU = "[r]ecord  [e]valuate  [f]ollow-up  [n]ew topic  [q]uit > "


async def _ainput(prompt: str = "") -> str:
    """input() without blocking the event loop, so timers keep ticking."""
    return await asyncio.to_thread(input, prompt)


def build_practice_view(api: CoachAPIClient, duration: int) -> PracticeView:
    """Practice view with typed answers and a timer that ends the recording."""
    # Typing is slower than speaking, so the no-speech watchdog is off
    speech = SpeechCapture(TypedRecognizer, no_speech_timeout=None)

    def on_expire():
        if speech.is_listening:
            speech.stop_listening()
            print("\nTime's up! Press Enter to continue.")

    timer = CountdownTimer(duration, on_expire=on_expire)
    return PracticeView(api, speech, timer, duration)


async def _ask_topic(view: PracticeView) -> None:
    while True:
        topic = await _ainput("Enter a topic: ")
        if await view.generate_question(topic):
            return
        print(view.render())
        view.dismiss_error()


async def _record(view: PracticeView) -> None:
    if not view.can_record:
        print("Time's up. Ask for a follow-up or pick a new topic." if view.question else "Generate a question first.")
        return
    if not view.toggle_recording():
        print(view.render())
        view.dismiss_error()
        return

    print(f"Recording ({view.timer.formatted_time}). Type your answer; an empty line stops.")
    recognizer = view.speech.recognizer
    while view.speech.is_listening:
        line = await _ainput()
        if not view.speech.is_listening:
            break
        if not line.strip():
            view.toggle_recording()
            break
        recognizer.submit(line)


async def run_practice(api: CoachAPIClient, duration: int, question: Optional[str] = None) -> None:
    view = build_practice_view(api, duration)
    try:
        if question:
            view.set_question(question)
        else:
            await _ask_topic(view)

        while True:
            print()
            print(view.render())
            view.dismiss_error()
            choice = (await _ainput(MENU)).strip().lower()

            if choice == "r":
                await _record(view)
            elif choice == "e":
                if not view.answer:
                    print("Record an answer first.")
                    continue
                print("Evaluating...")
                await view.evaluate_answer()
            elif choice == "f":
                if not view.answer:
                    print("Record an answer first.")
                    continue
                print("Generating follow-up question...")
                await view.generate_follow_up()
            elif choice == "n":
                await _ask_topic(view)
            elif choice == "q":
                return
    finally:
        view.close()


async def run_resume(api: CoachAPIClient, path: str, duration: int) -> bool:
    view = ResumeUploaderView(api)
    if view.select_file(path):
        print("Processing resume...")
        await view.submit()
    print(view.render())
    if view.error or not view.questions:
        return False

    choice = (await _ainput("Practice which question? (number, Enter to skip) ")).strip()
    if not choice:
        return True
    try:
        question = view.pick(int(choice))
    except (ValueError, IndexError) as e:
        logger.warning(f"Invalid question choice {choice!r}: {e}")
        print(f"Invalid choice: {e}")
        return False

    await run_practice(api, duration, question=question)
    return True


async def run_history(api: CoachAPIClient) -> bool:
    view = SessionHistoryView(api)
    ok = await view.load()
    print(view.render())
    return ok


async def _run(args) -> bool:
    async with CoachAPIClient(args.api_url) as api:
        if args.command == "practice":
            await run_practice(api, args.duration)
            return True
        if args.command == "resume":
            return await run_resume(api, args.path, args.duration)
        return await run_history(api)


def main(argv=None):
    """Main entry point"""
    settings = Settings()

    parser = argparse.ArgumentParser(description="AI Interview Coach - practice client")
    parser.add_argument(
        "--api-url",
        default=settings.api_url,
        help=f"Interview coach server URL (default: {settings.api_url})"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level for client diagnostics (default: WARNING)"
    )
    parser.add_argument(
        "--log-file",
        default=settings.log_file,
        help="Also write JSON log lines to this file (default: LOG_FILE)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    practice = subparsers.add_parser("practice", help="Answer generated questions on a topic")
    practice.add_argument(
        "--duration",
        type=int,
        default=DEFAULT_ANSWER_SECONDS,
        help=f"Seconds per answer (default: {DEFAULT_ANSWER_SECONDS})"
    )

    resume = subparsers.add_parser("resume", help="Generate questions from a PDF resume")
    resume.add_argument("path", help="Path to the resume PDF")
    resume.add_argument("--duration", type=int, default=DEFAULT_ANSWER_SECONDS)

    subparsers.add_parser("history", help="Show past practice sessions")

    args = parser.parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file)

    logger.info(f"Running {args.command} against {args.api_url}")
    try:
        ok = asyncio.run(_run(args))
    except (KeyboardInterrupt, EOFError):
        print("\nBye!")
        return
    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
