import logging

import torch
from somap import (
    SOM,
    Dataset,
    ExpRestraint,
    GaussianInfluence,
    RadiusReducingInfluence,
    RandomSelector,
    RandomWeightsInitializer,
)

def run_som_example():
    """
    Demonstrates the basic usage of the somap.SOM library by clustering random colors.
    """
    logging.basicConfig(level=logging.INFO)
    print("--- Running SOM Library Example ---")

    # 1. Configuration
    map_rows, map_cols = 30, 30
    num_iterations = 2000
    random_seed = 42 # For reproducibility

    print(f"Configuration: Map Size=({map_rows}, {map_cols}), Iterations={num_iterations}")

    # 2. Generate Dummy Data
    # One random RGB color per neuron, values in [0, 1)
    torch.manual_seed(random_seed)
    colors = Dataset(torch.rand(map_rows * map_cols, 3))
    print(f"Generated dataset: {colors}")

    influences = {
        "radius reducing": RadiusReducingInfluence(radius=4),
        "gaussian": GaussianInfluence(initial_width=4),
    }

    for name, influence in influences.items():
        # 3. Initialize the SOM
        som_model = SOM(
            map_rows,
            map_cols,
            initializer=RandomWeightsInitializer(),
            selector=RandomSelector(),
            restraint=ExpRestraint(initial_rate=1),
            influence=influence,
        )
        som_model.initialize(colors)
        initial_error = som_model.quantization_error(colors)

        # 4. Train the SOM
        print(f"\nTraining {name} SOM for {num_iterations} iterations...")
        som_model.learn(colors, num_iterations)
        print("Training complete.")

        # 5. Calculate Quantization Error
        q_error = som_model.quantization_error(colors)
        print(f"Quantization Error: {initial_error:.4f} -> {q_error:.4f}")

        # 6. Map pure colors to the SOM
        for label, color in (("red", [1.0, 0.0, 0.0]), ("green", [0.0, 1.0, 0.0]), ("blue", [0.0, 0.0, 1.0])):
            bmu = som_model.test(torch.tensor(color))
            print(f"  {label:>5} -> BMU @ {bmu.position}, distance {bmu.distance:.4f}")

    print("\n--- SOM Library Example Finished ---")

if __name__ == "__main__":
    run_som_example()
