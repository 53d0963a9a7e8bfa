"""CLI entry point for article-trainer.

Usage:
  python -m article_trainer serve [--port PORT] [--host HOST]
  python -m article_trainer quiz [--level LEVEL] [--count N]
  python -m article_trainer levels
  python -m article_trainer check [--level LEVEL]
"""
from __future__ import annotations

import sys


def main():
    args = sys.argv[1:]
    command = args[0] if args else "serve"

    if command == "serve":
        _serve(args[1:])
    elif command == "quiz":
        _quiz(args[1:])
    elif command == "levels":
        _levels()
    elif command == "check":
        _check(args[1:])
    else:
        print(f"Unknown command: {command}")
        print("Commands: serve, quiz, levels, check")
        sys.exit(1)


def _parse_flag(args: list[str], name: str, default: str) -> str:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _serve(args: list[str]):
    import uvicorn

    port = int(_parse_flag(args, "--port", "8766"))
    host = _parse_flag(args, "--host", "127.0.0.1")

    print(f"Starting Article Trainer on http://{host}:{port}")
    print("Press Ctrl+C to stop\n")
    uvicorn.run(
        "article_trainer.app:app",
        host=host,
        port=port,
        reload=False,
        timeout_graceful_shutdown=5,
    )


def _levels():
    from article_trainer.config import load_settings
    from article_trainer.dictionary import available_levels, resource_name

    settings = load_settings()
    for level in available_levels(settings):
        path = settings.data_path / resource_name(level, settings.filename_template)
        marker = "" if path.exists() else "  (missing)"
        default = " *" if level == settings.default_level else ""
        print(f"  {level:4s}{default:2s} {path.name}{marker}")


def _check(args: list[str]):
    from article_trainer.config import load_settings
    from article_trainer.dictionary import LoadError, load_level

    settings = load_settings()
    level = _parse_flag(args, "--level", settings.default_level)
    try:
        entries = load_level(level, settings.data_path, settings.filename_template)
    except LoadError as e:
        print(f"Level {level}: {e}")
        sys.exit(1)

    counts = {"der": 0, "die": 0, "das": 0}
    for e in entries:
        counts[e.article.value] += 1
    print(f"Level {level}: {len(entries)} nouns")
    for article, n in counts.items():
        print(f"  {article}: {n}")


def _quiz(args: list[str], input_fn=input):
    from article_trainer.config import load_settings
    from article_trainer.models import Article
    from article_trainer.quiz import Finished, InSession, LoadFailed, QuizMachine

    settings = load_settings()
    level = _parse_flag(args, "--level", settings.default_level)
    count = int(_parse_flag(args, "--count", str(settings.session_size)))

    machine = QuizMachine(settings)
    state = machine.select_level(level)
    if isinstance(state, LoadFailed):
        print(f"Could not load level {level}: {state.message}")
        sys.exit(1)

    print(f"German Articles Trainer ({state.level}, {state.pool_size} nouns)")
    print("Answer with der / die / das, 'h' for a hint, 'q' to quit.\n")
    state = machine.start_session(count)

    while True:
        if isinstance(state, InSession):
            session = state.session
            noun = session.current_noun
            hint = f"  ({noun.translation})" if session.show_hint else ""
            answer = input_fn(f"[{session.progress}] ___ {noun.noun}{hint}: ").strip().lower()
            if answer == "q":
                return
            if answer == "h":
                state = machine.toggle_hint()
                continue
            try:
                article = Article.parse(answer)
            except ValueError:
                print("  Please type der, die or das.")
                continue
            state = machine.submit_answer(article)
            feedback = state.session.answer_feedback
            if feedback.is_correct:
                print(f"  Correct! {noun.full_form}")
            else:
                print(f"  Wrong. It is {noun.full_form}")
            if noun.example_source:
                print(f"  {noun.example_source}")
            state = machine.advance()
            continue

        if isinstance(state, Finished):
            result = state.result
            print()
            if result.is_complete:
                print("Congratulations! You have learned all selected words:")
                for e in result.original_nouns:
                    print(f"  {e.full_form} – {e.translation}")
                return
            print("Quiz Results")
            print(f"  Correct answers:   {result.correct_count}")
            print(f"  Incorrect answers: {result.incorrect_count}")
            print(f"  Success rate:      {result.success_rate}%")
            choice = input_fn(
                f"Practice failed words ({len(result.failed_nouns)})? [y/N] "
            ).strip().lower()
            if choice != "y":
                return
            state = machine.practice_failed_words()
            print()
            continue

        return


if __name__ == "__main__":
    main()
