"""
JPEG Artifact Filter
Real-time JPEG-style compression artifacts for images and video
"""

import argparse
import json
import logging
import sys
import warnings

warnings.filterwarnings('ignore', category=RuntimeWarning)

logger = logging.getLogger("jpeg_effect")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Apply JPEG-style compression artifacts to an image or video.")
    parser.add_argument("input", nargs="?", help="Image or video file")
    parser.add_argument("-o", "--output", help="Output path (default: degraded.png / degraded.mp4)")
    parser.add_argument("--synthetic", help="Use a generated test image instead of a file "
                                            "(checkerboard, stripes, gradient, chroma_stripes)")
    parser.add_argument("--settings", help="JSON file with effect settings")
    parser.add_argument("-q", "--quality", type=float, help="Quality factor (effective quality is its square)")
    parser.add_argument("--downsample", type=int, help="Pre-downsample ratio (1-8)")
    parser.add_argument("--downsample-filter", choices=("point", "bilinear"))
    parser.add_argument("--subsample", type=int, help="Chroma subsample ratio (1-32)")
    parser.add_argument("--subsample-filter", choices=("point", "bilinear"))
    parser.add_argument("--sweep", action="store_true", help="Print PSNR/SSIM over a range of quality factors")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def load_settings(args):
    from models.effect_settings import EffectSettings

    values = {}
    if args.settings:
        with open(args.settings, "r", encoding="utf-8") as f:
            values.update(json.load(f))

    overrides = {
        "quality_factor": args.quality,
        "downsample_ratio": args.downsample,
        "downsample_filter": args.downsample_filter,
        "chroma_subsample_ratio": args.subsample,
        "subsample_filter": args.subsample_filter,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return EffectSettings.from_mapping(values)


def run_video(path, output, settings):
    from engines.pipeline import CompressionEffect, process_frames
    from utils.image_io import read_video_frames, video_fps, VideoSink

    output = output or "degraded.mp4"
    with CompressionEffect() as effect, VideoSink(output, fps=video_fps(path)) as sink:
        for frame in process_frames(read_video_frames(path), settings, effect):
            sink.write(frame)
        if not effect.available:
            logger.warning("Effect was disabled; frames were passed through unchanged")
    print(f"Frames: {sink.frames_written}")
    print(f"Saved: {output}")


def run_image(image, output, settings, sweep):
    from engines.analysis import measure_effect, quality_sweep
    from utils.image_io import save_image

    print(f"Image: {image.shape[1]}x{image.shape[0]}")
    print(f"Quality factor: {settings.quality_factor} (effective {settings.effective_quality:g})")

    if sweep:
        print("\n=== Quality sweep ===")
        for factor, result in quality_sweep(image, settings):
            print(f"q={factor:<5g} PSNR(Y) {result.psnr_y:6.2f} dB  SSIM(Y) {result.ssim_y:.4f}")
        return

    result = measure_effect(image, settings)
    if not result.applied:
        print("Effect unavailable; image passed through unchanged")

    print("\n=== Results ===")
    print(f"PSNR (Y):  {result.psnr_y:.2f} dB")
    print(f"SSIM (Y):  {result.ssim_y:.4f}")
    print(f"PSNR (RGB):{result.psnr_rgb:.2f} dB")
    print(f"Time:      {result.frame_time_ms:.2f} ms")

    output = output or "degraded.png"
    save_image(result.degraded_image, output)
    print(f"\nSaved: {output}")


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args)
    except (OSError, ValueError, TypeError) as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 2

    from utils.image_io import is_video, load_image
    from utils.test_images import generate_demo_image, SYNTHETIC_IMAGES

    if args.synthetic:
        image = generate_demo_image(args.synthetic, 256)
        if image is None:
            print(f"Unknown synthetic image '{args.synthetic}', choose from {sorted(SYNTHETIC_IMAGES)}",
                  file=sys.stderr)
            return 2
    elif args.input is None:
        build_parser().print_help()
        return 0
    elif is_video(args.input):
        run_video(args.input, args.output, settings)
        return 0
    else:
        print(f"Loading: {args.input}")
        image = load_image(args.input)

    run_image(image, args.output, settings, args.sweep)
    return 0


if __name__ == '__main__':
    sys.exit(main())
