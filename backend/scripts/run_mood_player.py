#!/usr/bin/env python3
"""
Script de demostración del pipeline de estado de ánimo desde consola.

Abre la webcam, captura una foto, la envía al clasificador remoto, busca
canciones del género correspondiente y muestra la cola resultante. Con
--query se salta la cámara y se hace solo la búsqueda manual.

Uso:
    python backend/scripts/run_mood_player.py [--classifier-url URL] [--catalog-url URL]
    python backend/scripts/run_mood_player.py --query acoustic
    python backend/scripts/run_mood_player.py --save-metrics metrics/latencias.json

Ejemplo:
    python backend/scripts/run_mood_player.py --classifier-url http://192.168.1.13:5000/detect_emotion
"""

import argparse
import logging
import sys
from pathlib import Path

from moodplayer.app import DEFAULT_CONFIG
from moodplayer.core.camera import MediaCaptureSession
from moodplayer.core.emotion import MoodClassifierClient
from moodplayer.core.music import CatalogSearchClient
from moodplayer.core.pipeline import MoodPipelineOrchestrator
from moodplayer.core.player import PlaybackController
from moodplayer.core.utils.metrics import get_metrics


def parse_args():
    parser = argparse.ArgumentParser(description="Pipeline de estado de ánimo a lista de reproducción")
    parser.add_argument('--classifier-url', default=DEFAULT_CONFIG['CLASSIFIER_URL'],
                        help='Endpoint del clasificador de estado de ánimo')
    parser.add_argument('--catalog-url', default=DEFAULT_CONFIG['CATALOG_URL'],
                        help='Endpoint de búsqueda del catálogo')
    parser.add_argument('--camera', type=int, default=DEFAULT_CONFIG['CAMERA_INDEX'],
                        help='Índice de la cámara')
    parser.add_argument('--timeout', type=float, default=DEFAULT_CONFIG['REQUEST_TIMEOUT'],
                        help='Timeout de las peticiones HTTP (segundos)')
    parser.add_argument('--quality', default=DEFAULT_CONFIG['PREFERRED_QUALITY'],
                        help='Calidad de audio exigida')
    parser.add_argument('--query', help='Búsqueda manual (no usa la cámara)')
    parser.add_argument('--save-metrics', type=Path, metavar='RUTA',
                        help='Guardar las latencias de cada etapa en un JSON')
    parser.add_argument('--verbose', action='store_true', help='Logs de depuración')
    return parser.parse_args()


def print_queue(controller: PlaybackController):
    queue = controller.queue
    current = controller.state.current_track
    print(f"\nCola de reproducción ({len(queue)} canciones):")
    for index, track in enumerate(queue, start=1):
        marker = '>' if current is not None and track.id == current.id else ' '
        print(f" {marker} {index:2d}. {track.name} - {track.artist or 'Desconocido'}")


def main():
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        force=True
    )

    print("=" * 70)
    print("Mood Music Player - Demo de consola")
    print("=" * 70)

    controller = PlaybackController()
    orchestrator = MoodPipelineOrchestrator(
        session=MediaCaptureSession(camera_index=args.camera),
        classifier=MoodClassifierClient(args.classifier_url, timeout=args.timeout),
        catalog=CatalogSearchClient(args.catalog_url, timeout=args.timeout, preferred_quality=args.quality),
        controller=controller,
    )
    orchestrator.subscribe(lambda status: print(f"[ESTADO] {status['status']}"))

    try:
        if args.query:
            result = orchestrator.search(args.query)
        else:
            if orchestrator.start_camera().is_failure():
                return 1
            result = orchestrator.run()

        if result.is_failure():
            return 1

        outcome = result.value()
        if outcome.prediction is not None:
            print(f"\nEstado de ánimo: {outcome.prediction.mood}")
            print(f"Géneros: {', '.join(outcome.genres)}")
        print_queue(controller)

        stats = get_metrics().get_statistics()
        if stats:
            print("\nLatencias:")
            for stage, values in stats.items():
                print(f"  {stage:15s} {values['mean'] * 1000:8.1f} ms")
        if args.save_metrics:
            get_metrics().save_to_json(args.save_metrics)
        return 0
    finally:
        orchestrator.close()


if __name__ == "__main__":
    sys.exit(main())
