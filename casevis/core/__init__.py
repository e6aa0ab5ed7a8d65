"""Text-to-anatomy mapping, text annotation and scene highlighting"""
