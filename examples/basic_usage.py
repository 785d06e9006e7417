#!/usr/bin/env python3
"""
Example: Basic usage of Track Insight as a Python library
"""

from track_insight import UNDEFINED, load_csv, run_all
from track_insight.queries import top3_per_platform, top5_artists_by_stream

# Load the Spotify/YouTube export
store = load_csv("/path/to/Spotify_Youtube.csv")

for artist, streams in top5_artists_by_stream(store):
    print(f"{artist}: {streams:,.0f} streams")
print()

for platform, tracks in top3_per_platform(store).items():
    print(platform)
    for track, streams in tracks:
        print(f"  - {track} ({streams:,.0f})")
print()

results = run_all(store, workers=4, album="Demon Days")
r = results["dance_energy_correlation"]
print("danceability/energy correlation:", "undefined" if r is UNDEFINED else f"{r:.3f}")
print(f"Ran {len(results)} queries over {len(store)} tracks")
