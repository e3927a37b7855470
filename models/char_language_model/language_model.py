"""
Character-level Language Model

A fixed-order Markov model over characters. Training scans a corpus once and
records, for every window of `window_length` characters, which characters
followed it and how often. Generation repeatedly samples the next character
from the distribution recorded for the trailing window.

Classes:
    - LanguageModel: Owns the window -> FrequencyTable map, the window length
      and the random generator used for sampling.

Usage:
    >>> model = LanguageModel(window_length=3, seed=20)
    >>> model.train("abracadabra")
    >>> model.generate("abr", 10)

Notes:
    - Calling `train` more than once adds new counts on top of the existing
      ones. Construct a fresh model to retrain from scratch.
    - A model is not safe for concurrent `train` calls. Concurrent `generate`
      calls on one model share its random generator and must be serialized
      by the caller to stay reproducible.
"""

import logging
import pickle
import random

from models.char_language_model.corpus_reader import FileCharacterReader, StringCharacterReader
from models.char_language_model.exceptions import InsufficientCorpusError
from models.char_language_model.frequency_table import FrequencyTable
from utils.config_loader import ConfigError, load_config
from utils.loggers.json_logger import get_logger
from utils.system_monitoring import ResourceMonitor


class LanguageModel:
    """
    Character-level Markov language model with a fixed window length.
    """

    def __init__(self, window_length, seed=None, logger=None):
        """
        Initializes an untrained language model.

        Args:
            window_length (int): Number of characters used as context (must be positive)
            seed (int, optional): Seed for the random generator. Models built with the
                                  same seed and trained on the same corpus generate the
                                  same texts. If None, the generator is seeded from
                                  system entropy.
            logger (logging.Logger, optional): Logger for model activity
        """
        if isinstance(window_length, bool) or not isinstance(window_length, int) or window_length < 1:
            raise ValueError(f"window_length must be a positive integer, got {window_length!r}")

        self.window_length = window_length
        self.seed = seed
        self.random_generator = random.Random(seed)
        self.char_data_map = {}

        self.logger = logger or logging.getLogger(__name__)
        self.resource_monitor = ResourceMonitor(logger=self.logger)

        self.logger.info("LanguageModel initialized", extra={
            "metrics": {
                "window_length": window_length,
                "seeded": seed is not None
            }
        })

    @classmethod
    def from_config(cls, environment="development", config_dir=None, **overrides):
        """
        Build a model from the ``language_model`` YAML configuration.

        Args:
            environment (str): Which environment's configuration to load
            config_dir (str, optional): Directory holding the configuration files
            **overrides: Values that take precedence over the file
                         (``window_length``, ``seed``, ``logger``)

        Returns:
            LanguageModel: A new, untrained model
        """
        config = load_config("language_model", environment=environment, config_dir=config_dir)
        config.update({k: v for k, v in overrides.items() if k != "logger"})

        if config.get("window_length") is None:
            raise ConfigError("language_model configuration must define window_length")

        logger = overrides.get("logger")
        if logger is None:
            log_config = config.get("logging") or {}
            logger = get_logger(
                f"language_model_{environment}",
                log_file=log_config.get("log_file"),
                console_json=log_config.get("console_json", True)
            )

        return cls(window_length=config["window_length"], seed=config.get("seed"), logger=logger)

    def train(self, corpus):
        """
        Builds the model from a corpus, scanning it once from left to right.

        Args:
            corpus (str or reader): The training text, or any object exposing
                                    ``has_more()`` and ``read_next_character()``

        Raises:
            InsufficientCorpusError: If the corpus is shorter than the window length
            StreamReadError: If the corpus source fails while being read
        """
        reader = StringCharacterReader(corpus) if isinstance(corpus, str) else corpus

        self.resource_monitor.start("language_model_training")
        try:
            window = ""
            for _ in range(self.window_length):
                if not reader.has_more():
                    self.logger.error("Corpus too short to form a window", extra={
                        "metrics": {
                            "characters_available": len(window),
                            "window_length": self.window_length
                        }
                    })
                    raise InsufficientCorpusError(self.window_length, len(window))
                window += reader.read_next_character()

            characters_read = len(window)
            while reader.has_more():
                character = reader.read_next_character()
                characters_read += 1

                probs = self.char_data_map.get(window)
                if probs is None:
                    probs = FrequencyTable()
                    self.char_data_map[window] = probs

                probs.record_occurrence(character)
                window = window[1:] + character

            # Tables are independent of each other
            for probs in self.char_data_map.values():
                self.calculate_probabilities(probs)
        finally:
            duration = self.resource_monitor.stop()

        self.logger.info("Training completed", extra={
            "metrics": {
                "characters_read": characters_read,
                "duration_seconds": duration,
                **self.get_statistics()
            }
        })

    def train_from_file(self, path, encoding="utf-8"):
        """
        Builds the model from the text in the given file.

        Args:
            path (str): Path to the corpus file
            encoding (str): Text encoding of the file
        """
        self.logger.info("Training from file", extra={
            "metrics": {"path": str(path), "encoding": encoding}
        })
        with FileCharacterReader(path, encoding=encoding) as reader:
            self.train(reader)

    def calculate_probabilities(self, probs):
        """Computes and sets the p and cp fields of every record in `probs`."""
        probs.finalize_probabilities()

    def get_random_char(self, probs):
        """Returns a random character from `probs`, consuming exactly one draw."""
        return probs.sample_character(self.random_generator.random())

    def generate(self, initial_text, text_length):
        """
        Generates text from the probabilities learned during training.

        Args:
            initial_text (str): Text to start with. Only its trailing window is
                                kept in the output.
            text_length (int): Maximum number of characters to generate

        Returns:
            str: The trailing window of `initial_text` followed by the generated
                 characters, or `initial_text` unchanged if it is shorter than
                 the window length. Generation stops early when the current
                 window was never seen during training.
        """
        if len(initial_text) < self.window_length:
            self.logger.debug("Initial text shorter than window, nothing generated", extra={
                "metrics": {
                    "initial_text_length": len(initial_text),
                    "window_length": self.window_length
                }
            })
            return initial_text

        window = initial_text[len(initial_text) - self.window_length:]
        generated_text = [window]
        stopped_early = False

        for _ in range(text_length):
            probs = self.char_data_map.get(window)
            if probs is None:
                stopped_early = True
                self.logger.warning("Window not found in model, stopping generation", extra={
                    "metrics": {"window": window}
                })
                break

            character = self.get_random_char(probs)
            generated_text.append(character)
            window = window[1:] + character

        result = "".join(generated_text)

        self.logger.info("Generation completed", extra={
            "metrics": {
                "requested_length": text_length,
                "generated_length": len(result) - self.window_length,
                "stopped_early": stopped_early
            }
        })

        return result

    def get_statistics(self):
        """
        Summarize the size of the trained model.

        Returns:
            dict: Window count, record count, total transitions and the largest
                  number of distinct next characters seen for a single window
        """
        return {
            "window_length": self.window_length,
            "window_count": len(self.char_data_map),
            "record_count": sum(len(probs) for probs in self.char_data_map.values()),
            "total_transitions": sum(probs.total_count for probs in self.char_data_map.values()),
            "max_branching": max((len(probs) for probs in self.char_data_map.values()), default=0)
        }

    def save_model(self, filepath):
        """
        Pickle the model, including the state of its random generator.

        Args:
            filepath (str): Path to save the model
        """
        try:
            with open(filepath, "wb") as f:
                pickle.dump(self, f)
        except OSError as e:
            self.logger.error("Failed to save model", extra={
                "metrics": {"filepath": str(filepath), "error": str(e)}
            })
            raise

        self.logger.info("Model saved", extra={
            "metrics": {"filepath": str(filepath), **self.get_statistics()}
        })

    @classmethod
    def load_model(cls, filepath, logger=None):
        """
        Load a model saved with `save_model`.

        Args:
            filepath (str): Path to the pickled model
            logger (logging.Logger, optional): Logger to attach to the loaded model

        Returns:
            LanguageModel: The restored model
        """
        with open(filepath, "rb") as f:
            model = pickle.load(f)

        if not isinstance(model, cls):
            raise TypeError(f"{filepath} does not contain a {cls.__name__}")

        if logger is not None:
            model.logger = logger
            model.resource_monitor = ResourceMonitor(logger=logger)

        model.logger.info("Model loaded", extra={
            "metrics": {"filepath": str(filepath), **model.get_statistics()}
        })
        return model

    def __getstate__(self):
        """Drop the logger and resource monitor, which are recreated on load."""
        state = self.__dict__.copy()
        state.pop("logger", None)
        state.pop("resource_monitor", None)
        return state

    def __setstate__(self, state):
        self.__dict__.update(state)
        self.logger = logging.getLogger(__name__)
        self.resource_monitor = ResourceMonitor(logger=self.logger)

    def __str__(self):
        """Returns one line per window: ``<window> : <records>``."""
        lines = []
        for window, probs in self.char_data_map.items():
            lines.append(f"{window} : {probs}\n")
        return "".join(lines)
