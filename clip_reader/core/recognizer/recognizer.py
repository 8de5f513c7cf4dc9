import numpy as np
import re

from clip_reader                        import ModuleLogger
from clip_reader.core.classifier        import Classifier
from clip_reader.core.feature_extractor import FeatureExtractor, FeatureVector, compute_moments
from clip_reader.core.preprocessor      import Clip, Pattern, Preprocessor
from clip_reader.core.recognizer.text   import Text, postprocess
from pathlib                            import Path

logger = ModuleLogger('recognizer')()

class ClipReader:
    """
    Runs the recognition pipeline on press clips: preprocessing, feature extraction,
    classification and postprocessing. Results of the last clip stay available for
    training, pattern export and statistics.
    """

    def __init__(
        self,
        config_file     : Path | None = None,
        config_override : dict | None = None
    ):
        """
        Initializes the ClipReader instance.

        Args:
            config_file     : Optional custom path to preprocessor.yml
            config_override : Optional nested overrides for the preprocessing configuration
        """
        self.preprocessor      = Preprocessor(config_file = config_file, config_override = config_override)
        self.feature_extractor = FeatureExtractor()
        self.classifier        = None
        self.patterns          = []
        self.space_locations   = []
        self.feature_vectors   = []
        self.characters        = []
        self.text              = Text()

    # -------------------- Pipeline Stages --------------------

    def extract_features(self, clip: Clip) -> list[FeatureVector]:
        """
        Preprocesses the clip and describes each of its characters.
        """
        self.patterns, self.space_locations = self.preprocessor.run(clip)
        self.feature_vectors                = self.feature_extractor.compute_moments(self.patterns)
        return self.feature_vectors

    def classify(self, classifier: Classifier) -> list[str]:
        self.classifier = classifier
        self.characters = classifier.classify_all(self.feature_vectors)
        return self.characters

    def recognize(self, clip: Clip, classifier: Classifier) -> Text:
        """
        Reads the text of a clip.

        Args:
            clip       : Gray-level clip
            classifier : Classifier holding the dataset to compare against

        Returns:
            Text: Recognized, postprocessed text
        """
        self.extract_features(clip)
        self.classify(classifier)
        self.text = postprocess(self.characters, self.space_locations)

        logger.info(f"Recognized {len(self.patterns)} characters: '{self.text}'")
        return self.text

    # -------------------- Training --------------------

    def train(self, clip: Clip, classifier: Classifier, reference_text: str) -> float | None:
        """
        Recognizes a clip and trains the classifier with the text it should have produced.
        Whitespace in the reference is ignored. Nothing is trained when the number of
        characters found differs from the length of the reference.

        Args:
            clip           : Gray-level clip
            classifier     : Classifier to train
            reference_text : Expected text of the clip

        Returns:
            float | None: Hit rate in percent, or None when training was skipped
        """
        reference = re.sub(r'\s+', '', reference_text)

        self.recognize(clip, classifier)
        if len(reference) != len(self.characters):
            logger.warning(
                f"Training skipped: {len(self.characters)} characters found, "
                f"{len(reference)} expected in the reference text"
            )
            return None

        return classifier.train(self.feature_vectors, self.characters, list(reference))

    def train_pattern(self, image: np.ndarray, code: int, classifier: Classifier) -> float:
        """
        Trains the classifier with a single synthetic character image.

        Args:
            image      : Black-on-white character image no larger than the pattern plane
            code       : Class code the image represents
            classifier : Classifier to train

        Returns:
            float: 100.0 when the character was already recognized, 0.0 otherwise
        """
        pattern   = Pattern.from_bitmap(image)
        vector    = compute_moments(pattern)
        character = classifier.character_of(classifier.classify(vector))

        self.patterns        = [pattern]
        self.feature_vectors = [vector]
        self.characters      = [character]
        return classifier.train_single(vector, character, code)

    # -------------------- Output --------------------

    def export_pattern_images(self, output_dir: Path) -> list[Path]:
        """
        Writes every pattern of the last clip as pattern1.bmp, pattern2.bmp, ...

        Returns:
            list: Paths of the written images
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents = True, exist_ok = True)

        written = []
        for number, pattern in enumerate(self.patterns, start = 1):
            output_path = output_dir / f'pattern{number}.bmp'
            pattern.write_image(output_path, invert = True)
            written.append(output_path)

        logger.info(f"Exported {len(written)} pattern images to {output_dir}")
        return written

    def statistics_report(self) -> list[str]:
        """
        Statistics of every stage, as printable lines.
        """
        sections = [
            ('Preprocessing', self.preprocessor.statistics),
            ('Feature extraction', self.feature_extractor.statistics)
        ]
        if self.classifier is not None:
            sections.append(('Classification', self.classifier.statistics))

        lines = []
        for title, statistics in sections:
            report = statistics.report()
            if report:
                lines.append(f"[{title}]")
                lines.extend(f"  {line}" for line in report)
        return lines

    def log_statistics(self):
        for line in self.statistics_report():
            logger.info(line)
