"""
CPU scheduling simulator.
Runs Round Robin, Aging-Weighted FCFS and SJF over a set of processes and
reports the resulting Gantt chart and waiting/turnaround metrics.
"""
