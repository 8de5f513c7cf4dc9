import argparse
import cv2

from clip_reader                        import *
from clip_reader.core.feature_extractor import FEATURES
from omegaconf                          import OmegaConf
from pathlib                            import Path

logger = ModuleLogger('main')()

def load_dataset(args: argparse.Namespace, settings) -> Dataset:
    """
    Opens the dataset named on the command line, or the one configured in classifier.yml.
    """
    if args.database:
        return open_dataset('duckdb', Path(args.database), features = FEATURES)
    if args.file:
        return open_dataset('plain_text', Path(args.file), features = FEATURES)

    engine = settings.dataset.engine
    path   = Utils.find_root('pyproject.toml') / settings.dataset[engine].path
    return open_dataset(engine, path, features = settings.dataset.features)

def main():

    project_root = Utils.find_root('pyproject.toml')
    settings     = OmegaConf.load(project_root / 'clip_reader' / 'config' / 'classifier.yml')
    parser       = argparse.ArgumentParser(
        description = "Recognize the text of scanned press clips."
    )

    parser.add_argument(
        "images",
        nargs = "+",
        help  = "Clip images to process."
    )
    parser.add_argument(
        "-f", "--file",
        type = str,
        help = "Plain-text dataset file (created when missing)."
    )
    parser.add_argument(
        "-d", "--database",
        type = str,
        help = "DuckDB dataset file (created when missing)."
    )
    parser.add_argument(
        "-c", "--config",
        type = str,
        help = "Custom preprocessor configuration file."
    )
    parser.add_argument(
        "-t", "--text-training",
        type = str,
        help = "Train the dataset with the reference text stored in this file."
    )
    parser.add_argument(
        "-a", "--auto-training",
        action = "store_true",
        help   = "Train with single character images named after their class code (e.g. 65.bmp)."
    )
    parser.add_argument(
        "-p", "--create-patterns",
        action = "store_true",
        help   = "Write the patterns of each clip as pattern<n>.bmp images."
    )
    parser.add_argument(
        "--patterns-dir",
        type    = str,
        default = "patterns",
        help    = "Directory receiving the pattern images."
    )
    parser.add_argument(
        "-s", "--statistics",
        action = "store_true",
        help   = "Print the statistics of every stage."
    )
    parser.add_argument(
        "-e", "--expected",
        type = str,
        help = "File holding the expected text, to report how close the recognized text is."
    )

    args = parser.parse_args()

    dataset    = load_dataset(args, settings)
    classifier = Classifier(dataset, ClassificationParadigm(settings.classifier.paradigm))
    reader     = ClipReader(config_file = Path(args.config) if args.config else None)
    reference  = Path(args.text_training).read_text(encoding = 'utf-8') if args.text_training else None
    expected   = Path(args.expected).read_text(encoding = 'utf-8').strip() if args.expected else None

    for image in args.images:
        image_path = Path(image).resolve()
        if not image_path.exists() or not image_path.is_file():
            print(f"Error: The specified image does not exist or is not a file: {image_path}")
            continue

        try:
            if args.auto_training:
                pattern_image = cv2.imread(str(image_path), cv2.IMREAD_GRAYSCALE)
                if pattern_image is None:
                    raise FileNotFoundError(f"Image not found: {image_path}")
                hit_rate = reader.train_pattern(pattern_image, int(image_path.stem), classifier)
                print(f"{image_path.name}: hit rate {hit_rate:.2f}%")

            elif reference is not None:
                hit_rate = reader.train(Clip.from_image_file(image_path), classifier, reference)
                if hit_rate is None:
                    print(f"{image_path.name}: character count does not match the reference text, not trained")
                else:
                    print(f"{image_path.name}: hit rate {hit_rate:.2f}%")

            else:
                text = reader.recognize(Clip.from_image_file(image_path), classifier)
                print(text)
                if expected is not None:
                    print(f"Similarity to expected text: {text.similarity(expected):.2%}")

            if args.create_patterns:
                reader.export_pattern_images(Path(args.patterns_dir) / image_path.stem)

            if args.statistics:
                print('\n'.join(reader.statistics_report()))
                reader.log_statistics()

        except Exception as e:
            logger.error(f"Failed to process image {image_path.name}: {e}")
            print(f"Error: {image_path.name}: {e}")
            continue

    if isinstance(dataset, PlainTextDataset) and dataset.modified:
        dataset.save()

if __name__ == "__main__":
    main()
