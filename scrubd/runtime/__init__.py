"""Container inventories from Docker, Podman and containerd."""