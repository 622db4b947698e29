"""Shared catalog records and a deterministic jitter source for the test modules."""

import copy


class MidpointJitter:
    """Always returns 0.5 so every estimator lands in the middle of its range."""

    def random(self):
        return 0.5


RECORDS = [
    {
        "id": "lorenz-attractor",
        "title": "Lorenz Attractor",
        "category": "attractors",
        "type": "real_time_interactive",
        "description": "A chaotic butterfly traced by the Lorenz system",
        "technicalDetails": {
            "algorithm": "Runge-Kutta 4th order integration",
            "complexity": "O(n)",
            "precision": "Double-precision floating point",
            "frameRate": "60 FPS",
            "scientificAccuracy": True,
        },
        "experience": {"interactionLevel": "high", "audioReactive": True},
        "parameters": {"sigma": 10, "rho": 28, "beta": 2.67},
    },
    {
        "id": "clifford-attractor",
        "title": "Clifford Attractor",
        "category": "attractors",
        "type": "static_generative",
        "description": "Strange attractor density rendering",
        "technicalDetails": {"algorithm": "Iterated map", "complexity": "O(n)"},
        "experience": {"interactionLevel": "medium", "contemplative": True},
        "parameters": {"a": 1.5, "b": -1.8},
    },
    {
        "id": "buddhabrot",
        "title": "Buddhabrot",
        "category": "fractals",
        "type": "static_generative",
        "description": "Fractal escape orbits of the Mandelbrot set",
        "technicalDetails": {
            "algorithm": "Monte Carlo sampling",
            "complexity": "O(n²)",
            "renderTime": "Minutes to hours",
        },
        "experience": {"interactionLevel": "low", "meditative": True, "contemplative": True},
        "outputs": {"formats": ["PNG", "TIFF"], "colorModes": ["RGB"]},
    },
    {
        "id": "julia-explorer",
        "title": "Julia Explorer",
        "category": "fractals",
        "type": "static_generative",
        "description": "Fractal Julia set explorer",
        "technicalDetails": {
            "algorithm": "Monte Carlo sampling",
            "complexity": "O(n²)",
            "renderTime": "Seconds",
        },
        "experience": {"interactionLevel": "low", "meditative": True, "contemplative": True},
        "outputs": {"formats": ["PNG"], "colorModes": ["RGB"]},
    },
    {
        "id": "substrate",
        "title": "Substrate",
        "category": "organic",
        "type": "growth_simulation",
        "description": "Crack growth patterns forming city-like structures",
        "longDescription": "An emergent process of organic cracks",
        "technicalDetails": {"algorithm": "Agent based", "complexity": "O(n log n)"},
        "experience": {"interactionLevel": "medium", "educational": True},
    },
    {
        "id": "particle-swarm",
        "title": "Particle Swarm",
        "category": "particles",
        "type": "real_time_interactive",
        "description": "Swarm of particles orbiting attractors",
        "technicalDetails": {"algorithm": "3D particle integration", "complexity": "O(n²)"},
        "experience": {"interactionLevel": "high", "vrCompatible": True, "collaborative": True},
        "outputs": {"formats": ["3D models", "video"]},
    },
]


def records(count=None):
    data = copy.deepcopy(RECORDS)
    return data if count is None else data[:count]


def catalog_document():
    data = records()
    return {
        "experiences": data[:2],
        "apps": data[2:4],
        "experiments": data[4:] + [{"title": "missing id"}, dict(data[0])],
        "collections": [
            {"id": "chaos", "title": "Chaos", "projects": ["lorenz-attractor", "clifford-attractor"]},
            {"id": "broken"},
        ],
    }
