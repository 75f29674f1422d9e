"""Built-in resource limits assumed when compiling shaders."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ResourceLimits:
    """Implementation limits of the target GL driver; defaults are conservative."""

    max_lights: int = 32
    max_clip_planes: int = 6
    max_texture_units: int = 32
    max_texture_coords: int = 32
    max_vertex_attribs: int = 64
    max_vertex_uniform_components: int = 4096
    max_varying_floats: int = 64
    max_vertex_texture_image_units: int = 32
    max_combined_texture_image_units: int = 80
    max_texture_image_units: int = 32
    max_fragment_uniform_components: int = 4096
    max_draw_buffers: int = 32
    max_vertex_uniform_vectors: int = 128
    max_varying_vectors: int = 8
    max_fragment_uniform_vectors: int = 16
    max_vertex_output_vectors: int = 16
    max_fragment_input_vectors: int = 15
    min_program_texel_offset: int = -8
    max_program_texel_offset: int = 7
    max_clip_distances: int = 8
    max_compute_work_group_count_x: int = 65535
    max_compute_work_group_count_y: int = 65535
    max_compute_work_group_count_z: int = 65535
    max_compute_work_group_size_x: int = 1024
    max_compute_work_group_size_y: int = 1024
    max_compute_work_group_size_z: int = 64
    max_compute_uniform_components: int = 1024
    max_compute_texture_image_units: int = 16
    max_compute_image_uniforms: int = 8
    max_compute_atomic_counters: int = 8
    max_compute_atomic_counter_buffers: int = 1
    max_varying_components: int = 60
    max_vertex_output_components: int = 64
    max_geometry_input_components: int = 64
    max_geometry_output_components: int = 128
    max_fragment_input_components: int = 128
    max_image_units: int = 8
    max_combined_image_units_and_fragment_outputs: int = 8
    max_combined_shader_output_resources: int = 8
    max_image_samples: int = 0
    max_vertex_image_uniforms: int = 0
    max_tess_control_image_uniforms: int = 0
    max_tess_evaluation_image_uniforms: int = 0
    max_geometry_image_uniforms: int = 0
    max_fragment_image_uniforms: int = 8
    max_combined_image_uniforms: int = 8
    max_geometry_texture_image_units: int = 16
    max_geometry_output_vertices: int = 256
    max_geometry_total_output_components: int = 1024
    max_geometry_uniform_components: int = 1024
    max_geometry_varying_components: int = 64
    max_tess_control_input_components: int = 128
    max_tess_control_output_components: int = 128
    max_tess_control_texture_image_units: int = 16
    max_tess_control_uniform_components: int = 1024
    max_tess_control_total_output_components: int = 4096
    max_tess_evaluation_input_components: int = 128
    max_tess_evaluation_output_components: int = 128
    max_tess_evaluation_texture_image_units: int = 16
    max_tess_evaluation_uniform_components: int = 1024
    max_tess_patch_components: int = 120
    max_patch_vertices: int = 32
    max_tess_gen_level: int = 64
    max_viewports: int = 16
    max_vertex_atomic_counters: int = 0
    max_tess_control_atomic_counters: int = 0
    max_tess_evaluation_atomic_counters: int = 0
    max_geometry_atomic_counters: int = 0
    max_fragment_atomic_counters: int = 8
    max_combined_atomic_counters: int = 8
    max_atomic_counter_bindings: int = 1
    max_vertex_atomic_counter_buffers: int = 0
    max_tess_control_atomic_counter_buffers: int = 0
    max_tess_evaluation_atomic_counter_buffers: int = 0
    max_geometry_atomic_counter_buffers: int = 0
    max_fragment_atomic_counter_buffers: int = 1
    max_combined_atomic_counter_buffers: int = 1
    max_atomic_counter_buffer_size: int = 16384
    max_transform_feedback_buffers: int = 4
    max_transform_feedback_interleaved_components: int = 64
    max_cull_distances: int = 8
    max_combined_clip_and_cull_distances: int = 8
    max_samples: int = 4
    max_mesh_output_vertices_nv: int = 256
    max_mesh_output_primitives_nv: int = 512
    max_mesh_work_group_size_x_nv: int = 32
    max_mesh_work_group_size_y_nv: int = 1
    max_mesh_work_group_size_z_nv: int = 1
    max_task_work_group_size_x_nv: int = 32
    max_task_work_group_size_y_nv: int = 1
    max_task_work_group_size_z_nv: int = 1
    max_mesh_view_count_nv: int = 4
    max_dual_source_draw_buffers_ext: int = 1

    non_inductive_for_loops: bool = True
    while_loops: bool = True
    do_while_loops: bool = True
    general_uniform_indexing: bool = True
    general_attribute_matrix_vector_indexing: bool = True
    general_varying_indexing: bool = True
    general_sampler_indexing: bool = True
    general_variable_indexing: bool = True
    general_constant_matrix_vector_indexing: bool = True


def default_resource_limits() -> ResourceLimits:
    """The limits used when no others are given."""
    return ResourceLimits()