import pytest
from pygltflib import (
    FLOAT, GLTF2, VEC3, Accessor, Attributes, Buffer, BufferView, Material, Mesh, Node,
    PbrMetallicRoughness, Primitive, Scene,
)

from casevis.core.mapping import OrganHighlight


def build_body_gltf():
    """Small body model: every mesh shares material 0, two meshes contain '06_Abdomen'"""
    mesh_nodes = ["05_Chest", "06_Abdomen_skin", "07_Lower_abdomen", "Eyes", "06_Abdomen_inner"]
    gltf = GLTF2(
        scene=0,
        scenes=[Scene(nodes=[0])],
        nodes=[Node(name="Body", children=list(range(1, len(mesh_nodes) + 1)))] + [
            Node(name=name, mesh=i) for i, name in enumerate(mesh_nodes)
        ],
        meshes=[
            Mesh(name=f"mesh_{i}", primitives=[Primitive(attributes=Attributes(POSITION=0), material=0)])
            for i in range(len(mesh_nodes))
        ],
        materials=[Material(name="skin", pbrMetallicRoughness=PbrMetallicRoughness(baseColorFactor=[0.8, 0.7, 0.6, 1.0]))],
    )
    # One triangle of zeros shared by every mesh, enough for a valid GLB
    gltf.buffers = [Buffer(byteLength=36)]
    gltf.bufferViews = [BufferView(buffer=0, byteOffset=0, byteLength=36)]
    gltf.accessors = [Accessor(bufferView=0, componentType=FLOAT, count=3, type=VEC3, max=[0, 0, 0], min=[0, 0, 0])]
    gltf.set_binary_blob(bytes(36))
    return gltf


@pytest.fixture
def body_gltf():
    return build_body_gltf()


@pytest.fixture
def abdomen_highlights():
    return [
        OrganHighlight("06_Abdomen", "#8B0000", "Necrotic Gut (Abdomen Area)"),
        OrganHighlight("07_Lower_abdomen", "#8B0000", "Necrotic Gut (Lower Abdomen Area)"),
    ]
