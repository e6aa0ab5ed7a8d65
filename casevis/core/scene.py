"""
CaseVis Scene Highlighter
Recolors body-region meshes of a glTF model for a list of organ highlights
"""

import base64
import copy
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple
from dataclasses import dataclass
import logging

from pygltflib import GLTF2, BufferFormat, Material, PbrMetallicRoughness

from .mapping import OrganHighlight

logger = logging.getLogger(__name__)

DEFAULT_EMISSIVE_INTENSITY = 0.4


class ModelLoadError(RuntimeError):
    """Raised when the body model asset cannot be read"""


@dataclass(frozen=True)
class OrganClick:
    """What a click on a mesh resolved to"""
    organ_name: str
    description: Optional[str] = None

    @property
    def message(self) -> str:
        return self.description or f"Clicked: {self.organ_name}"


def hex_to_linear_rgb(color: str) -> List[float]:
    """Convert '#RRGGBB' or '#RGB' sRGB hex to linear RGB factors, as glTF stores colors"""
    value = color.lstrip('#')
    if len(value) == 3:
        value = ''.join(ch * 2 for ch in value)
    if len(value) != 6:
        raise ValueError(f"Invalid hex color: {color}")

    channels = []
    for i in range(0, 6, 2):
        c = int(value[i:i + 2], 16) / 255.0
        channels.append(c / 12.92 if c <= 0.04045 else ((c + 0.055) / 1.055) ** 2.4)
    return channels


def resolve_highlight(mesh_name: str, highlights: Sequence[OrganHighlight]) -> Optional[OrganHighlight]:
    """
    First highlight whose organ name occurs in mesh_name, ignoring case

    Best-effort resolution that relies on the model's naming convention: mesh
    names embed region identifiers such as "06_Abdomen". The first match wins.

    Clicked names come from three.js and can differ from the names used for
    recoloring (see SceneHighlighter._node_name). A node whose mesh has several
    primitives loads as a group of meshes named after the glTF mesh, often with
    a "_<primitive>" suffix, so a click resolves only when that mesh name also
    carries the region identifier.
    """
    lowered = mesh_name.lower()
    for highlight in highlights:
        if highlight.organ_name.lower() in lowered:
            return highlight
    return None


class SceneHighlighter:
    """
    Owns one loaded glTF document and applies highlight passes to it

    Every pass restores the meshes referenced at load time, gives each mesh
    node its own copy of its mesh and materials, then recolors the first mesh
    node matching each highlight.
    """

    def __init__(self, gltf: GLTF2, source: str = "<memory>",
                 emissive_intensity: float = DEFAULT_EMISSIVE_INTENSITY):
        self.gltf = gltf
        self.source = source
        self.emissive_intensity = emissive_intensity

        # Snapshot of the document as loaded; clones from a pass live past these counts
        self._base_mesh_count = len(gltf.meshes)
        self._base_material_count = len(gltf.materials)
        self._original_meshes: Dict[int, int] = {
            index: node.mesh for index, node in enumerate(gltf.nodes) if node.mesh is not None
        }

        self.applied: List[Tuple[OrganHighlight, str]] = []

    @classmethod
    def load_model(cls, path: str, **kwargs) -> 'SceneHighlighter':
        """
        Load a .glb or .gltf body model

        Raises:
            ModelLoadError: when the file is missing or cannot be parsed
        """
        model_path = Path(path)
        if not model_path.is_file():
            raise ModelLoadError(f"Model file not found: {path}")

        try:
            gltf = GLTF2().load(str(model_path))
        except Exception as e:
            raise ModelLoadError(f"Failed to load model {path}: {e}") from e

        if gltf is None:
            raise ModelLoadError(f"Failed to load model {path}")

        if model_path.suffix.lower() == '.gltf':
            # Pack external/data-uri buffers so the document can be shipped as a single GLB
            gltf.convert_buffers(BufferFormat.BINARYBLOB)

        logger.info(f"Loaded model {path} with {len(gltf.nodes)} nodes and {len(gltf.meshes)} meshes")
        return cls(gltf, source=str(path), **kwargs)

    @classmethod
    def from_bytes(cls, data: bytes, source: str = "<bytes>", **kwargs) -> 'SceneHighlighter':
        """Load a binary GLB document held in memory"""
        try:
            gltf = GLTF2.load_from_bytes(data)
        except Exception as e:
            raise ModelLoadError(f"Failed to load model {source}: {e}") from e
        if gltf is None:
            raise ModelLoadError(f"Failed to load model {source}")
        return cls(gltf, source=source, **kwargs)

    def iter_mesh_nodes(self) -> Iterator[Tuple[int, str]]:
        """Yield (node index, name) for mesh nodes in depth-first pre-order"""
        gltf = self.gltf
        if gltf.scenes:
            scene = gltf.scenes[gltf.scene if gltf.scene is not None else 0]
            roots = list(scene.nodes or [])
        else:
            roots = list(range(len(gltf.nodes)))

        stack = list(reversed(roots))
        visited = set()
        while stack:
            index = stack.pop()
            if index in visited:
                continue
            visited.add(index)

            node = gltf.nodes[index]
            if node.mesh is not None:
                yield index, self._node_name(index)
            stack.extend(reversed(node.children or []))

    def _node_name(self, index: int) -> str:
        node = self.gltf.nodes[index]
        if node.name:
            return node.name
        mesh_index = self._original_meshes.get(index, node.mesh)
        if mesh_index is not None and self.gltf.meshes[mesh_index].name:
            return self.gltf.meshes[mesh_index].name
        return f"node_{index}"

    def mesh_names(self) -> List[str]:
        return [name for _, name in self.iter_mesh_nodes()]

    def reset(self):
        """Drop clones from the previous pass and point nodes back at their original meshes"""
        del self.gltf.meshes[self._base_mesh_count:]
        del self.gltf.materials[self._base_material_count:]
        for index, mesh_index in self._original_meshes.items():
            self.gltf.nodes[index].mesh = mesh_index
        self.applied = []

    def _clone_for_node(self, index: int):
        gltf = self.gltf
        mesh = copy.deepcopy(gltf.meshes[self._original_meshes[index]])

        for primitive in mesh.primitives:
            if primitive.material is not None:
                material = copy.deepcopy(gltf.materials[primitive.material])
            else:
                material = Material(pbrMetallicRoughness=PbrMetallicRoughness())
            gltf.materials.append(material)
            primitive.material = len(gltf.materials) - 1

        gltf.meshes.append(mesh)
        gltf.nodes[index].mesh = len(gltf.meshes) - 1

    def _recolor(self, index: int, color: str):
        rgb = hex_to_linear_rgb(color)
        mesh = self.gltf.meshes[self.gltf.nodes[index].mesh]

        for primitive in mesh.primitives:
            material = self.gltf.materials[primitive.material]
            if material.pbrMetallicRoughness is None:
                material.pbrMetallicRoughness = PbrMetallicRoughness()
            pbr = material.pbrMetallicRoughness

            alpha = pbr.baseColorFactor[3] if pbr.baseColorFactor and len(pbr.baseColorFactor) == 4 else 1.0
            pbr.baseColorFactor = rgb + [alpha]
            material.emissiveFactor = [c * self.emissive_intensity for c in rgb]

    def apply(self, highlights: Sequence[OrganHighlight]) -> List[str]:
        """
        Reset every mesh node and recolor the first match for each highlight

        Args:
            highlights: Organ highlights to show

        Returns:
            Names of the recolored meshes, one per highlight that found a mesh
        """
        self.reset()

        mesh_nodes = list(self.iter_mesh_nodes())
        for index, _ in mesh_nodes:
            self._clone_for_node(index)

        recolored = []
        for highlight in highlights:
            target = highlight.organ_name.lower()
            found = next(((i, name) for i, name in mesh_nodes if target in name.lower()), None)

            if found is None:
                logger.warning(
                    f"Mesh for organ '{highlight.organ_name}' not found in model {self.source}. Check mesh names."
                )
                continue

            index, name = found
            self._recolor(index, highlight.color)
            self.applied.append((highlight, name))
            recolored.append(name)
            logger.debug(f"Highlighted {name} with {highlight.color}")

        logger.info(f"Applied {len(recolored)} of {len(highlights)} highlights to {self.source}")
        return recolored

    @staticmethod
    def identify(mesh_name: str, highlights: Sequence[OrganHighlight]) -> OrganClick:
        """Resolve a clicked mesh to its highlight, falling back to the raw mesh name"""
        highlight = resolve_highlight(mesh_name, highlights)
        if highlight is None:
            return OrganClick(organ_name=mesh_name)
        return OrganClick(organ_name=highlight.organ_name, description=highlight.description)

    def to_glb_bytes(self) -> bytes:
        # save_to_bytes returns the GLB header and chunks as a list
        return b"".join(self.gltf.save_to_bytes())

    def to_base64(self) -> str:
        return base64.b64encode(self.to_glb_bytes()).decode('ascii')
