#!/usr/bin/env python3
"""
SphereTrace - A Python Ray Casting Renderer

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import time

from spheretrace.camera import OrthoCamera
from spheretrace.renderer import Renderer, RenderSettings
from spheretrace.scene_parser import SceneParseError, load_scene
from spheretrace.scenes import random_scene, single_sphere_scene, occluded_sphere_scene


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='SphereTrace - A Python Ray Casting Renderer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene demo --seed 7 --output render.bmp
  python main.py --scene shadow --output shadow.png
  python main.py --file scene.yaml --threads 4 --output scene.png
        '''
    )

    parser.add_argument('--width', type=int, default=256, help='Image width (default: 256)')
    parser.add_argument('--height', type=int, default=256, help='Image height (default: 256)')
    parser.add_argument('--depth', type=int, default=5, help='Max reflection depth (default: 5)')
    parser.add_argument('--bias', type=float, default=1e-3, help='Shadow bias (default: 0.001)')
    parser.add_argument('--albedo', action='store_true', help='Weight diffuse shading by material albedo')
    parser.add_argument('--threads', type=int, default=1, help='Number of threads (0=auto)')
    parser.add_argument('--seed', type=int, default=None, help='Seed for the random demo scene')
    parser.add_argument('--count', type=int, default=15, help='Spheres in the random demo scene (default: 15)')
    parser.add_argument('--output', type=str, default='output/img.bmp', help='Output filename')
    parser.add_argument('--scene', type=str, default='demo', choices=['demo', 'single', 'shadow'],
                        help='Built-in scene to render (default: demo)')
    parser.add_argument('--file', type=str, default=None,
                        help='YAML/JSON scene file (overrides --scene and the size/quality flags)')
    parser.add_argument('--verbose', action='store_true', help='Log render details')
    return parser


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )

    print("=" * 60)
    print("SphereTrace Renderer")
    print("=" * 60)

    try:
        if args.file:
            print(f"\nLoading scene: {args.file}")
            scene, camera, settings = load_scene(args.file)
        else:
            settings = RenderSettings(
                width=args.width,
                height=args.height,
                shadow_bias=args.bias,
                max_recursion_depth=args.depth,
                apply_albedo=args.albedo,
                num_threads=args.threads
            )
            camera = OrthoCamera(0.0)
            print(f"\nCreating scene: {args.scene}")
            if args.scene == 'single':
                scene = single_sphere_scene()
            elif args.scene == 'shadow':
                scene = occluded_sphere_scene()
            else:
                scene = random_scene(seed=args.seed, count=args.count)
    except (SceneParseError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  Max Depth: {settings.max_recursion_depth}")
    print(f"  Threads: {settings.num_threads}")
    print(f"  Spheres in scene: {len(scene)}")

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    print("\nRendering...")
    start_time = time.time()

    framebuffer = renderer.render(scene, camera)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")

    print(f"\nSaving to: {args.output}")
    try:
        framebuffer.save(args.output)
    except (OSError, ValueError) as e:
        print(f"Error: cannot save {args.output}: {e}", file=sys.stderr)
        return 1

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
