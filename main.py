"""
Galaxy Hands - Gesture-Driven Particle Galaxy

Entry point for the application.
"""
import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Galaxy Hands - hand gestures shape a particle galaxy",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--mode",
        choices=["signs", "letters"],
        default=None,
        help="Gesture vocabulary (overrides config)",
    )

    parser.add_argument(
        "--grammar",
        type=Path,
        default=None,
        help="YAML gesture grammar replacing the built-in one",
    )

    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Open the galaxy window fullscreen",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show the camera feed with landmarks and gesture labels instead",
    )

    return parser.parse_args()


def run_webcam_debug(config):
    """
    Run webcam in debug mode - shows camera feed with landmarks.
    Useful for tuning gesture thresholds against a real hand.
    """
    import cv2
    from gestures import GestureClassifier, GestureDebouncer, LandmarkHistory, get_grammar, NONE
    from webcam import HandTracker

    g = config.gestures
    grammar = get_grammar(g.mode, g.grammar_file)
    classifier = GestureClassifier(grammar)
    debouncer = GestureDebouncer.for_grammar(grammar, g.hold_frames, g.letter_confirm_frames)
    history = LandmarkHistory(slots=2, capacity=g.history_size)

    print("Starting webcam debug mode...")
    print(f"Grammar: {grammar.name} ({len(grammar.symbols)} symbols)")
    print("Press 'q' to quit")
    print("-" * 40)

    with HandTracker(config) as tracker:
        if not tracker.start():
            print("ERROR: Could not open camera")
            return 1

        try:
            last_stable = NONE
            while True:
                hands = tracker.get_hands()
                if hands is None:
                    continue

                history.retain(len(hands))
                for slot, hand in enumerate(hands[:2]):
                    history.push(slot, hand)

                raw = classifier.classify(hands, history)
                result = debouncer.update(raw)

                frame = tracker.get_frame_with_landmarks(hands)
                if frame is not None:
                    cv2.putText(
                        frame, f"Raw: {raw}", (10, 30),
                        cv2.FONT_HERSHEY_SIMPLEX, 1, (0, 255, 0), 2
                    )

                    info_lines = [
                        f"Stable: {result.stable}",
                        f"Hands: {len(hands)}",
                        f"Hold: {debouncer.state.hold_count}/{debouncer.hold_frames}",
                    ]
                    if grammar.spelling:
                        info_lines.append(f"Spelled: {debouncer.buffer}")
                    for i, line in enumerate(info_lines):
                        cv2.putText(
                            frame, line, (10, 60 + i * 25),
                            cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1
                        )

                    cv2.imshow("Galaxy Hands Debug", frame)

                # Print stable gesture changes to console
                if result.stable != last_stable:
                    last_stable = result.stable
                    print(f"[{tracker.frame_count:5d}] {result.stable}")
                if result.appended is not None:
                    print(f"[{tracker.frame_count:5d}] spelled: {debouncer.buffer}")

                # Check for quit
                if cv2.waitKey(1) & 0xFF == ord('q'):
                    break

        finally:
            cv2.destroyAllWindows()

    return 0


def run_galaxy(config):
    """Run the particle galaxy with hand tracking on a worker thread."""
    import signal
    import atexit
    from PyQt5.QtWidgets import QApplication
    from PyQt5.QtCore import QThread, Qt
    from webcam import WebcamWorker
    from ui import GalaxyWindow

    app = QApplication(sys.argv)

    window = GalaxyWindow(config)
    if config.ui.fullscreen:
        window.showFullScreen()
    else:
        window.show()

    # Setup background worker and thread
    thread = QThread()
    worker = WebcamWorker(config)
    worker.moveToThread(thread)

    def cleanup():
        """Ensure camera is released on exit."""
        print("\nCleaning up camera resources...")
        worker.stop_process()
        thread.quit()
        thread.wait(2000)
        print("Cleanup complete.")

    # Register cleanup for various exit scenarios
    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    # Connect signals (Use QueuedConnection so detections land on the UI thread)
    thread.started.connect(worker.start_process)
    worker.hands_detected.connect(window.on_hands, Qt.QueuedConnection)
    worker.tracking_started.connect(window.on_tracking_started, Qt.QueuedConnection)
    worker.error.connect(window.show_error, Qt.QueuedConnection)
    worker.finished.connect(thread.quit, Qt.QueuedConnection)
    window.closed.connect(worker.stop_process, Qt.DirectConnection)

    # Start thread
    thread.start()

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)  # Avoid double cleanup

    return result


def main():
    """Main entry point."""
    args = parse_args()

    # Load config
    from session import load_config
    config = load_config(args.config)

    # Apply CLI overrides
    if args.mode:
        config.gestures.mode = args.mode
    if args.grammar:
        config.gestures.grammar_file = str(args.grammar)
    if args.fullscreen:
        config.ui.fullscreen = True

    print("Galaxy Hands starting...")
    print(f"  Gestures: {config.gestures.grammar_file or config.gestures.mode}")
    print(f"  Debug: {args.debug}")
    print()

    if args.debug:
        return run_webcam_debug(config)
    return run_galaxy(config)


if __name__ == "__main__":
    sys.exit(main())
