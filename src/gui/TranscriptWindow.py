"""
TranscriptWindow - Tk window showing the live transcript.

Renders SpeechSnapshot values published by SpeechController. Snapshots
arrive on the event-loop thread and are rendered on the Tk thread via
root.after(). Button clicks are delegated to callbacks; the window never
touches the controller directly.
"""
import tkinter as tk
from tkinter import ttk
from typing import Callable, Dict, Optional

from src.gui import TranscriptPresenter
from src.types import SpeechSnapshot


class TranscriptWindow:
    """Top-level transcript window.

    Attributes:
        root: tkinter root window
        text_widget: Read-only text area with the display text
    """

    def __init__(
        self,
        config: Dict,
        on_start: Callable[[], None],
        on_stop: Callable[[], None],
        on_reset: Callable[[], None],
        root: Optional[tk.Tk] = None,
    ):
        """
        Args:
            config: Application configuration (``gui`` and ``transcript`` sections)
            on_start: Called when the microphone button is pressed while idle
            on_stop: Called when the microphone button is pressed while listening
            on_reset: Called when Reset is pressed
            root: Existing Tk root (created if None)
        """
        gui_config = config.get('gui', {})
        self._on_start = on_start
        self._on_stop = on_stop
        self._on_reset = on_reset
        self._sound_level_scale = float(
            gui_config.get('sound_level_scale', TranscriptPresenter.DEFAULT_SOUND_LEVEL_SCALE)
        )
        self._is_listening = False

        self.root = root or tk.Tk()
        self.root.title(gui_config.get('title', 'Speech To Text'))
        self.root.geometry("900x640")

        container = ttk.Frame(self.root, padding=20)
        container.pack(fill=tk.BOTH, expand=True)

        tk.Label(container, text=gui_config.get('title', 'Speech To Text'),
                 font=("Arial", 24, "bold")).pack(anchor=tk.W)

        # Header pills: ready / status / locale, plus Reset when a session is done
        self.pill_frame = ttk.Frame(container)
        self.pill_frame.pack(fill=tk.X, pady=(10, 10))
        self.pill_labels = [
            ttk.Label(self.pill_frame, relief=tk.GROOVE, padding=(10, 4))
            for _ in range(3)
        ]
        for label in self.pill_labels:
            label.pack(side=tk.LEFT, padx=(0, 8))
        self.reset_button = ttk.Button(self.pill_frame, text='Reset', command=self._on_reset)

        self.text_widget = tk.Text(container, wrap=tk.WORD, font=("Arial", 18),
                                   height=10, state=tk.DISABLED)
        self.text_widget.pack(fill=tk.BOTH, expand=True)

        self.error_label = tk.Label(container, fg="#B63939", anchor=tk.W, justify=tk.LEFT)
        self.error_label.pack(fill=tk.X, pady=(10, 0))

        self.mic_button = ttk.Button(container, command=self._on_mic_click)
        self.mic_button.pack(pady=(12, 4))
        self.caption_label = ttk.Label(container)
        self.caption_label.pack()

        self.level_bar = ttk.Progressbar(container, maximum=1.0, mode='determinate')
        self.level_bar.pack(fill=tk.X, pady=(10, 0))

    def on_snapshot(self, snapshot: SpeechSnapshot) -> None:
        """Controller observer: schedule rendering on the Tk thread."""
        try:
            self.root.after(0, self.render, snapshot)
        except RuntimeError:
            # Main loop not running (e.g. during shutdown)
            pass

    def render(self, snapshot: SpeechSnapshot) -> None:
        """Update all widgets from a snapshot. Must run on the Tk thread."""
        self._is_listening = snapshot.is_listening

        for label, text in zip(self.pill_labels, TranscriptPresenter.format_pills(snapshot)):
            label.config(text=text)

        if TranscriptPresenter.show_reset(snapshot):
            self.reset_button.pack(side=tk.LEFT, padx=(0, 8))
        else:
            self.reset_button.pack_forget()

        self.text_widget.config(state=tk.NORMAL)
        self.text_widget.delete('1.0', tk.END)
        self.text_widget.insert('1.0', snapshot.display_text)
        self.text_widget.see(tk.END)
        self.text_widget.config(state=tk.DISABLED)

        self.error_label.config(text=snapshot.error_message)

        self.mic_button.config(text=TranscriptPresenter.mic_button_label(snapshot.is_listening))
        self.caption_label.config(text=TranscriptPresenter.mic_caption(snapshot.is_listening))
        self.level_bar['value'] = TranscriptPresenter.sound_level_fraction(
            snapshot.sound_level, self._sound_level_scale
        )

    def run(self) -> None:
        """Run the Tk main loop until the window is closed."""
        self.root.mainloop()

    def _on_mic_click(self) -> None:
        if self._is_listening:
            self._on_stop()
        else:
            self._on_start()
