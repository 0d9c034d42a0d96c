"""Script Sync: speech-text alignment and caption segmentation engine.

WHY: Narrated videos are built from a script written before any audio
exists. Once a narration is recorded and run through a speech recognizer,
the script words have to be pinned back onto the recognizer's noisy
timestamps, and the aligned text has to be re-cut into captions that
respect broadcast readability rules.

HOW: Two-stage pipeline. Align (core: similarity scoring, frame
quantization, cursor-based word matching, segment aggregation) and
caption (captions: phrase splitting, proportional chunk timing, line
splitting, quality scoring). The api package holds the collaborator
boundary (recognizer payloads, semantic splitter over HTTP); export turns
results into validated JSON-ready dicts.

RULES:
- The engine performs no I/O of its own except through collaborators
- Every result is created fresh per call and never mutated afterwards
- Low confidence, not exceptions, signals poor matches
"""

__version__ = "0.1.0"
