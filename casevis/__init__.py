"""
CaseVis - Medical Case Visualizer
Maps clinical terms in notes to highlighted body regions on a 3D model
"""

__version__ = "1.0.0"
